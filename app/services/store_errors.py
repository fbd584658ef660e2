"""Typed errors raised by the record store.

Codes are preserved exactly as the database reports them (PostgreSQL
SQLSTATE values) so callers can map them to user-facing messages.
"""

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
INSUFFICIENT_PRIVILEGE = "42501"
NO_ROWS = "PGRST116"


class StoreError(Exception):
    """Base class for every failure surfaced by the record store."""

    code: str | None = None

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class ConflictError(StoreError):
    code = UNIQUE_VIOLATION


class ForeignKeyError(StoreError):
    code = FOREIGN_KEY_VIOLATION


class PermissionDeniedError(StoreError):
    code = INSUFFICIENT_PRIVILEGE


class NotFoundError(StoreError):
    code = NO_ROWS


def error_for_code(code: str | None, message: str) -> StoreError:
    """Return the most specific StoreError subclass for a database error code."""
    for cls in (ConflictError, ForeignKeyError, PermissionDeniedError, NotFoundError):
        if code == cls.code:
            return cls(message)
    return StoreError(message, code=code)
