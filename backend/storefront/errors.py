# Overview: Service error taxonomy; routes translate these to HTTP statuses.

from __future__ import annotations


class ServiceError(Exception):
    """Base class for failures raised by the service layer."""
    status_code = 500
    default_message = "Service error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class ValidationError(ServiceError):
    """400-level input problem."""
    status_code = 400
    default_message = "Invalid input"


class InvalidInvitationError(ValidationError):
    """Invitation code is blank or not recognised."""
    default_message = "Invalid or expired invitation code"


class InvalidTransitionError(ServiceError):
    """Signup flow step called out of order."""
    status_code = 409
    default_message = "Invalid signup step"


class DuplicateUsernameError(ServiceError):
    status_code = 409
    default_message = "Username already exists"


class InvalidCredentialsError(ServiceError):
    status_code = 401
    default_message = "Invalid credentials"


class AccountDisabledError(ServiceError):
    status_code = 403
    default_message = "Your account has been disabled. Please contact support."


class ForbiddenError(ServiceError):
    """Caller is not allowed to perform the operation."""
    status_code = 403
    default_message = "Permission denied"


class ForbiddenTargetError(ForbiddenError):
    """Target account may not be changed through the admin console (built-in admin)."""
    default_message = "Administrator accounts cannot be modified"


class NotFoundError(ServiceError):
    status_code = 404
    default_message = "Not found"


class UserNotFoundError(NotFoundError):
    default_message = "User not found"


class BusinessNotFoundError(NotFoundError):
    default_message = "Business not found"


class OrderNotFoundError(NotFoundError):
    default_message = "Order not found"


class StaleRecordError(ServiceError):
    """Record changed since it was read (optimistic version check failed)."""
    status_code = 409
    default_message = "Record was modified by another request"


class StoreUnavailableError(ServiceError):
    """Backing store failed. Fatal at this layer, never retried."""
    status_code = 503
    default_message = "Record store unavailable"
