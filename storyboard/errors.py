"""Exception types and CLI exit codes for the storyboard package."""
from __future__ import annotations

import enum


class ExitCode(enum.IntEnum):
    """Standardised CLI exit codes.

    0: success
    1: user error (bad arguments, declined confirmation)
    2: no stored project
    3: persistence / internal error
    """

    SUCCESS = 0
    USER_ERROR = 1
    NOT_FOUND = 2
    INTERNAL_ERROR = 3


class StoryboardError(Exception):
    """Base exception for storyboard errors."""


class PersistenceError(StoryboardError):
    """Raised by a persistence gateway when a load or save fails."""


class StateValidationError(StoryboardError):
    """Raised when an imported project document does not validate.

    The store is left untouched when this is raised.
    """

    def __init__(self, message: str, errors: list[dict[str, object]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []
