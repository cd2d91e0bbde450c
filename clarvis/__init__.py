"""clarvis -- speaks Claude Code's replies aloud through lspeak."""

__version__ = "0.1.0"
