"""Configuration constants, helpers, and the TOML config loader for clarvis."""

import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from clarvis.errors import ConfigurationError
from clarvis.events.types import Style

CLAUDE_SETTINGS_PATH: Path = Path.home() / ".claude" / "settings.json"


def _xdg_dir(env_var: str, fallback: str) -> Path:
    raw = os.environ.get(env_var)
    if raw:
        return Path(raw) / "clarvis"
    return Path.home() / fallback / "clarvis"


CONFIG_DIR: Path = _xdg_dir("XDG_CONFIG_HOME", ".config")
CACHE_DIR: Path = _xdg_dir("XDG_CACHE_HOME", ".cache")

DEFAULT_CONFIG_PATH: Path = CONFIG_DIR / "config.toml"
DEFAULT_LOG_PATH: Path = CACHE_DIR / "debug.log"


# --- Runtime switches ---

DISABLE_ENV_VAR: str = "CLARVIS_VOICE"
DISABLE_SENTINEL: str = "off"


def is_voice_disabled() -> bool:
    """Return ``True`` when ``CLARVIS_VOICE=off`` is set in the environment."""
    return os.environ.get(DISABLE_ENV_VAR) == DISABLE_SENTINEL


def get_config_path() -> Path:
    """Return the config file path from CLARVIS_CONFIG, or the XDG default."""
    raw = os.environ.get("CLARVIS_CONFIG")
    if raw:
        return Path(raw).expanduser()
    return DEFAULT_CONFIG_PATH


# --- Pipeline timing ---

HOOK_INPUT_TIMEOUT: float = 1.0  # Must stay well under the 2s hook budget.
LLM_TIMEOUT: float = float(os.environ.get("CLARVIS_LLM_TIMEOUT", "10.0"))
TRANSCRIPT_SCAN_DEPTH: int = 20


# --- Summarization ---

OPENAI_ENDPOINT: str = "https://api.openai.com/v1/chat/completions"
OLLAMA_ENDPOINT: str = "http://localhost:11434/api/generate"
SEGMENTER_LANGUAGE: str = os.environ.get("CLARVIS_LANGUAGE", "en")


# --- Speech channel ---

LSPEAK_BINARY: str = os.environ.get("CLARVIS_LSPEAK", "lspeak")
FALLBACK_UTTERANCE: str = "Sir, processing failed."


# ---------------------------------------------------------------------------
# config.toml schema
# ---------------------------------------------------------------------------


class StyleConfig(BaseModel):
    """Per-context speaking style, ``[contexts.<name>]``."""

    style: Style
    cache: bool | None = None


class PromptConfig(BaseModel):
    """Style-specific instruction templates, ``[llm.prompts]``."""

    terse: str | None = None
    brief: str | None = None
    normal: str | None = None
    full: str | None = None

    def for_style(self, style: Style) -> str | None:
        return getattr(self, style.value, None)


class LLMConfig(BaseModel):
    """Summarization provider settings, ``[llm]``."""

    provider: str
    model: str
    api_key: str | None = None
    endpoint: str | None = None
    base_instruction: str | None = None
    prompts: PromptConfig = Field(default_factory=PromptConfig)


class VoiceConfig(BaseModel):
    """Speech channel settings, ``[voice]``."""

    provider: str | None = None
    voice_id: str | None = None
    api_key: str | None = None
    cache_threshold: float | None = Field(default=None, ge=0.0, le=1.0)


class DebugConfig(BaseModel):
    """Debug log settings, ``[debug]``."""

    enabled: bool = False
    log_path: str | None = None
    max_size_mb: float = 10.0


class ClarvisConfig(BaseModel):
    """The whole of ``config.toml``."""

    contexts: dict[str, StyleConfig] = Field(default_factory=dict)
    llm: LLMConfig
    voice: VoiceConfig | None = None
    debug: DebugConfig = Field(default_factory=DebugConfig)


def load_config(path: Path | None = None) -> ClarvisConfig:
    """Read and validate ``config.toml``.

    Raises ``ConfigurationError`` when the file is missing, is not valid
    TOML, or does not match the schema.
    """
    config_path = path if path is not None else get_config_path()

    try:
        with open(config_path, "rb") as fh:
            data = tomllib.load(fh)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Config file not found: {config_path}") from exc
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file {config_path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Invalid TOML in {config_path}: {exc}") from exc

    try:
        return ClarvisConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {exc}") from exc
