"""Domain errors for the user registry.

Every error carries an ``ErrorKind`` and a client-safe ``message``. The
inbound adapter maps kinds to HTTP status codes; nothing in this module
knows about HTTP.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from user_registry.domain.value_objects.bounds import LengthBound


class ErrorKind(Enum):
    """Category of a user registry failure."""

    INPUT_TOO_LARGE = "input_too_large"
    MALFORMED_PAYLOAD = "malformed_payload"
    VALIDATION_FAILED = "validation_failed"
    INVALID_IDENTIFIER = "invalid_identifier"
    NOT_FOUND = "not_found"
    STORAGE_FAILURE = "storage_failure"


class UserRegistryError(Exception):
    """Base class for user registry errors."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PayloadTooLargeError(UserRegistryError):
    """Raised when a request body exceeds the configured limit."""

    kind = ErrorKind.INPUT_TOO_LARGE

    def __init__(self, limit: int) -> None:
        super().__init__("Body too large.")
        self.limit = limit


class MalformedPayloadError(UserRegistryError):
    """Raised when a request body cannot be decoded into a user draft."""

    kind = ErrorKind.MALFORMED_PAYLOAD

    def __init__(self, reason: str = "") -> None:
        super().__init__("Invalid body.")
        self.reason = reason


class FieldLengthError(UserRegistryError):
    """Raised when a text field falls outside its length bound."""

    kind = ErrorKind.VALIDATION_FAILED

    def __init__(self, field: str, label: str, bound: LengthBound) -> None:
        super().__init__(
            f"{label} must have between {bound.minimum} and "
            f"{bound.maximum} characters."
        )
        self.field = field
        self.bound = bound


class InvalidUserIdError(UserRegistryError):
    """Raised when a user ID is not a valid UUID."""

    kind = ErrorKind.INVALID_IDENTIFIER

    def __init__(self, raw: object) -> None:
        super().__init__("Invalid UUID.")
        self.raw = raw


class UserNotFoundError(UserRegistryError):
    """Raised when no user matches the requested ID."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, user_id: object) -> None:
        super().__init__("User not found.")
        self.user_id = user_id


class StorageFailureError(UserRegistryError):
    """Raised when the storage backend fails an operation."""

    kind = ErrorKind.STORAGE_FAILURE

    def __init__(self, message: str, operation: str) -> None:
        super().__init__(message)
        self.operation = operation
