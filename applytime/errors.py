from __future__ import annotations


class ApplytimeError(Exception):
    """Base class for errors raised by applytime."""


class StreamDecodeError(ApplytimeError):
    """A record in the event stream could not be decoded; reading stops here."""

    def __init__(self, line: int, reason: str) -> None:
        super().__init__(line, reason)
        self.line = line
        self.reason = reason

    def __str__(self) -> str:
        return f"line {self.line}: {self.reason}"


class ConfigError(ApplytimeError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(path, reason)
        self.path = path
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"
