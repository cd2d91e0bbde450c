"""Exception types raised by the clarvis pipeline.

Input malformation (bad hook JSON, broken transcript lines, malformed
control tags) never raises: those stages degrade to "nothing to do".
Only configuration problems and external-service failures surface as
exceptions, and all of them derive from ``ClarvisError``.
"""


class ClarvisError(Exception):
    """Base class for fatal pipeline errors."""


class ConfigurationError(ClarvisError):
    """Configuration is missing, unreadable, or incomplete."""


class ProviderError(ClarvisError):
    """A summarization provider call failed.

    Carries the HTTP status code when the provider answered, or the kind
    of transport failure when it did not. Credentials are never included.
    """

    def __init__(
        self, provider: str, status_code: int | None = None, reason: str = ""
    ) -> None:
        self.provider = provider
        self.status_code = status_code
        self.reason = reason
        if status_code is not None:
            message = f"{provider} API error: {status_code} {reason}".rstrip()
        else:
            message = f"{provider} API error: {reason or 'request failed'}"
        super().__init__(message)


class SpeechError(ClarvisError):
    """The speech channel failed to speak a sentence."""

    def __init__(self, returncode: int | None = None, reason: str = "") -> None:
        self.returncode = returncode
        self.reason = reason
        if returncode is not None:
            message = f"lspeak exited with status {returncode}"
            if reason:
                message = f"{message}: {reason}"
        else:
            message = f"lspeak failed: {reason or 'unknown error'}"
        super().__init__(message)
