from __future__ import annotations

from typing import Optional


class FieldFilterError(Exception):
    """Base class for errors raised by json_field_filter."""


class ParseError(FieldFilterError, ValueError):
    """The source is not well-formed JSON.

    `detail` keeps the lexer's message for diagnostics; `user_message` is what
    the UI shows.
    """

    user_message = "Not valid JSON"

    def __init__(self, detail: str, position: Optional[int] = None):
        self.detail = detail
        self.position = position
        if position is not None:
            super().__init__(f"{detail} (at position {position})")
        else:
            super().__init__(detail)


class CancelledError(FieldFilterError):
    """The operation was aborted through its cancellation token."""

    def __init__(self, message: str = "Operation cancelled"):
        super().__init__(message)
