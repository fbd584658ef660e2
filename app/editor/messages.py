"""User-facing messages for store failures surfaced by editors."""

from app.services.store_errors import (
    INSUFFICIENT_PRIVILEGE,
    UNIQUE_VIOLATION,
    StoreError,
)

# Form-level banner key
SERVER_FIELD = "server"
REQUEST_FIELD = "request"

CONFLICT_MESSAGE = "A record with that name already exists"
PERMISSION_MESSAGE = "You do not have permission to perform this action"
GENERIC_MESSAGE = "Something went wrong. Please try again."
INVALID_INTENT_MESSAGE = "Invalid submission type"
BUSY_MESSAGE = "A submission is already in progress"

# code -> (field, message)
ERROR_MESSAGES: dict[str, tuple[str, str]] = {
    UNIQUE_VIOLATION: ("name", CONFLICT_MESSAGE),
    INSUFFICIENT_PRIVILEGE: (SERVER_FIELD, PERMISSION_MESSAGE),
}


def errors_for_store_error(exc: StoreError) -> dict[str, str]:
    field, message = ERROR_MESSAGES.get(exc.code or "", (SERVER_FIELD, GENERIC_MESSAGE))
    return {field: message}
