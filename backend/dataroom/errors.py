"""Domain errors raised by dataroom services.

Every error carries a display message and the HTTP status the API answers
with. ``code`` is the stable machine-readable tag clients can branch on.
"""

from __future__ import annotations


class DataroomError(RuntimeError):
    """Base error for dataroom flows."""

    status_code = 400
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def code(self) -> str:
        return type(self).__name__


class UserNotFound(DataroomError):
    status_code = 404
    default_message = "User not found"


class AccessDenied(DataroomError):
    """Raised when the user holds no grant on the dataroom."""

    status_code = 403
    default_message = "Access denied"


class InsufficientPermissions(DataroomError):
    """Raised when a grant exists but its role is below the requirement."""

    status_code = 403
    default_message = "Insufficient permissions"


class NotFound(DataroomError):
    status_code = 404
    default_message = "Not found"


class DuplicateName(DataroomError):
    status_code = 409
    default_message = "An item with this name already exists"


class DuplicateAccess(DataroomError):
    status_code = 409
    default_message = "User already has access to this dataroom"


class ImmutableOwner(DataroomError):
    status_code = 400
    default_message = "The owner grant cannot be changed"


class InvalidMimeType(DataroomError):
    status_code = 415
    default_message = "Only PDF files are supported"


class InvalidName(DataroomError):
    status_code = 400
    default_message = "Invalid name"


class DuplicateEmail(DataroomError):
    status_code = 400
    default_message = "User with this email already exists"


class InvalidCredentials(DataroomError):
    status_code = 401
    default_message = "Invalid email or password"


class StorageConflict(DataroomError):
    status_code = 409
    default_message = "Stored object is already in use"
