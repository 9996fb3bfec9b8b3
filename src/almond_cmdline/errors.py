"""Application-level exception types for almond-cmdline."""

from __future__ import annotations


class AlmondCmdlineError(Exception):
    """Base exception for almond-cmdline."""


class ConfigurationError(AlmondCmdlineError):
    """Raised for invalid settings or missing engine/conversation providers."""


class IdentityLookupError(AlmondCmdlineError):
    """Raised when the password database has no entry for the running user."""

    def __init__(self, uid: int) -> None:
        super().__init__(f"No user in the password database for uid {uid}")
        self.uid = uid


class MalformedEscapeArgument(AlmondCmdlineError):
    """Raised when an escape command argument cannot be parsed."""

    def __init__(self, letter: str, argument: str, expected: str) -> None:
        super().__init__(f"\\{letter} expects {expected}, got {argument!r}")
        self.letter = letter
        self.argument = argument


class CollaboratorError(AlmondCmdlineError):
    """Raised when the engine or the conversation fails while handling a line."""

    def __init__(self, operation: str, error: BaseException) -> None:
        super().__init__(f"{operation} failed: {error}")
        self.operation = operation
