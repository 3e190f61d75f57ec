"""
Errors raised by the streaming pipeline.
"""


class OllamaCliError(Exception):
    """Base class for every error the client reports to the user."""


class ConfigError(OllamaCliError):
    """Malformed configuration. Fatal when raised at startup."""


class TransportError(OllamaCliError):
    """Connection refused, reset or dropped before the stream finished."""


class ServerError(TransportError):
    """The server answered, but with an error instead of a stream."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(OllamaCliError):
    """A streamed line could not be decoded."""

    def __init__(self, message: str, line: str) -> None:
        super().__init__(f"{message}: {line!r}")
        self.line = line


class PagerError(OllamaCliError):
    """The pager program could not be started."""
