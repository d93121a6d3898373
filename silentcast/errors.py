"""Typed application errors and their user-facing messages."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorType(Enum):
    """Broad category of an application error."""

    UNKNOWN = 0
    CONFIG = 1
    PERMISSION = 2
    HOTKEY = 3
    EXECUTION = 4
    SYSTEM = 5


class SpellbookError(Exception):
    """Base error of the application, carrying a category and optional cause."""

    def __init__(
        self,
        error_type: ErrorType,
        message: str,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.error_type = error_type
        self.message = message
        self.cause = cause
        self.context: dict[str, Any] = {}
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message

    def with_context(self, key: str, value: Any) -> SpellbookError:
        """Attach a piece of context to the error and return the error."""
        self.context[key] = value
        return self


def wrap(error_type: ErrorType, message: str, cause: BaseException) -> SpellbookError:
    """Wrap ``cause`` in a SpellbookError of the given type."""
    return SpellbookError(error_type, message, cause)


def _find_spellbook_error(err: BaseException | None) -> SpellbookError | None:
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        if isinstance(err, SpellbookError):
            return err
        seen.add(id(err))
        err = err.__cause__
    return None


def is_type(err: BaseException | None, error_type: ErrorType) -> bool:
    """Tell whether ``err`` or one of its causes is a SpellbookError of ``error_type``."""
    found = _find_spellbook_error(err)
    return found is not None and found.error_type is error_type


_USER_MESSAGES = {
    ErrorType.CONFIG: "Configuration error: {}",
    ErrorType.PERMISSION: "Permission error: {}. Please check the permissions guide.",
    ErrorType.HOTKEY: "Hotkey error: {}",
    ErrorType.EXECUTION: "Execution error: {}",
    ErrorType.SYSTEM: "System error: {}",
}


def get_user_message(err: BaseException | None) -> str:
    """Return a short message for showing ``err`` to the user."""
    if err is None:
        return ""
    found = _find_spellbook_error(err)
    if found is None:
        return "An unexpected error occurred"
    template = _USER_MESSAGES.get(found.error_type, "Error: {}")
    return template.format(found.message)