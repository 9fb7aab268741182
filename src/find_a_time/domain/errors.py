"""Error kinds raised by the scheduling core."""


class FindATimeError(Exception):
    """Base class for expected, non-fatal scheduling errors."""


class InvalidInputError(FindATimeError):
    """Raised when a command is rejected locally, e.g. an empty title or name."""


class SessionNotFoundError(FindATimeError):
    """Raised when a session code does not match any stored session."""

    def __init__(self, code: str) -> None:
        super().__init__("We couldn't find that session. Double-check the code.")
        self.code = code


class PersistenceError(FindATimeError):
    """Raised by a backend when the durable record cannot be read or written."""


class CodeSpaceExhaustedError(FindATimeError):
    """Raised when every possible session code is already in use."""
