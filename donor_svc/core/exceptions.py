"""
Shared exception classes and error handling utilities for Donor Service API.

This module provides:
- Custom exception hierarchy for domain-specific errors
- Consistent error response formatting
- Exception handlers for FastAPI integration

Usage:
    from core.exceptions import DonorNotFoundError, DuplicateDonorError

    # In service layer - raise domain exceptions
    raise DuplicateDonorError(phone="+919322659210")

    # In FastAPI - register handlers via setup_exception_handlers(app)
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from core.middleware import route_template

logger = logging.getLogger(__name__)


# =============================================================================
# BASE EXCEPTION CLASSES
# =============================================================================

class DonorServiceError(Exception):
    """
    Base exception for all Donor Service domain errors.

    Every subclass carries an HTTP status code and a detail message so the
    exception handler can turn it into a response without extra mapping.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "An unexpected error occurred"

    def __init__(
        self,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs: Any
    ):
        """
        Initialize the exception.

        Args:
            detail: Human-readable error message. Uses class default if not provided.
            status_code: HTTP status code. Uses class default if not provided.
            **kwargs: Additional context to include in error response.
        """
        self.detail = detail or self.__class__.detail
        self.status_code = status_code or self.__class__.status_code
        self.context = {k: v for k, v in kwargs.items() if v is not None}
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        result: Dict[str, Any] = {"detail": self.detail}
        if self.context:
            result["context"] = self.context
        return result


# =============================================================================
# DONOR EXCEPTIONS
# =============================================================================

class DonorNotFoundError(DonorServiceError):
    """Raised when no donor is registered under a phone number."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Donor not found"

    def __init__(self, phone: Optional[str] = None, **kwargs: Any):
        super().__init__(phone=phone, **kwargs)


class DuplicateDonorError(DonorServiceError):
    """Raised when a phone number is already registered."""

    status_code = status.HTTP_409_CONFLICT
    detail = "Phone number already registered"

    def __init__(self, phone: Optional[str] = None, **kwargs: Any):
        super().__init__(phone=phone, **kwargs)


class InvalidPhoneNumberError(DonorServiceError):
    """Raised when a donor phone number does not match the configured pattern."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Please enter a valid 10-digit Indian phone number (e.g., +919322659210)"


class InvalidBloodGroupError(DonorServiceError):
    """Raised when a blood group is not one of the known ABO/Rh groups."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid blood group"

    def __init__(self, blood_group: Optional[str] = None, **kwargs: Any):
        detail = f"Invalid blood group '{blood_group}'" if blood_group else self.detail
        super().__init__(detail=detail, blood_group=blood_group, **kwargs)


class NoMatchingDonorsError(DonorServiceError):
    """Raised when an alert finds nobody to notify."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "No donors found with the required blood group."

    def __init__(self, area: Optional[str] = None, **kwargs: Any):
        where = "in any area" if area in (None, "All") else f"in the {area} area"
        super().__init__(
            detail=f"No donors found with the required blood group {where}.",
            area=area,
            **kwargs
        )


# =============================================================================
# HOSPITAL EXCEPTIONS
# =============================================================================

class MissingCredentialsError(DonorServiceError):
    """Raised when a login request leaves username or password empty."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Username and password are required"


class InvalidCredentialsError(DonorServiceError):
    """Raised when a hospital login does not match a stored account."""

    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Invalid credentials"


class DuplicateHospitalError(DonorServiceError):
    """Raised when a hospital username is already taken."""

    status_code = status.HTTP_409_CONFLICT
    detail = "Hospital username already exists"

    def __init__(self, username: Optional[str] = None, **kwargs: Any):
        detail = f"Hospital username '{username}' already exists" if username else self.detail
        super().__init__(detail=detail, username=username, **kwargs)


# =============================================================================
# BLOOD BANK & INVENTORY EXCEPTIONS
# =============================================================================

class BloodBankNotFoundError(DonorServiceError):
    """Raised when an inventory update names an unknown blood bank."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Blood bank not found"

    def __init__(self, name: Optional[str] = None, **kwargs: Any):
        super().__init__(blood_bank=name, **kwargs)


class DuplicateBloodBankError(DonorServiceError):
    """Raised when a blood bank name is already taken."""

    status_code = status.HTTP_409_CONFLICT
    detail = "Blood bank already exists"

    def __init__(self, name: Optional[str] = None, **kwargs: Any):
        detail = f"Blood bank '{name}' already exists" if name else self.detail
        super().__init__(detail=detail, blood_bank=name, **kwargs)


class InventoryItemNotFoundError(DonorServiceError):
    """Raised when an inventory item id does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Inventory item not found"

    def __init__(self, item_id: Optional[int] = None, **kwargs: Any):
        super().__init__(item_id=item_id, **kwargs)


# =============================================================================
# DATABASE EXCEPTIONS
# =============================================================================

class DatabaseError(DonorServiceError):
    """Raised when a database operation fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Database operation failed"

    def __init__(self, operation: Optional[str] = None, **kwargs: Any):
        detail = f"Database error during {operation}" if operation else self.detail
        super().__init__(detail=detail, operation=operation, **kwargs)


class DatabaseConnectionError(DatabaseError):
    """Raised when the database cannot be opened or initialized."""

    detail = "Failed to connect to database"


# =============================================================================
# EXTERNAL SERVICE EXCEPTIONS
# =============================================================================

class ExternalServiceError(DonorServiceError):
    """Raised when an external service call fails."""

    status_code = status.HTTP_502_BAD_GATEWAY
    detail = "External service error"


class SmsDeliveryError(ExternalServiceError):
    """
    Raised when the SMS provider rejects a message.

    `code` is the provider's error code (e.g. 21211 for an invalid number),
    or None when the failure happened before the provider answered.
    """

    detail = "SMS delivery failed"

    def __init__(self, to: Optional[str] = None, code: Optional[int] = None, reason: Optional[str] = None):
        self.to = to
        self.code = code
        detail = f"SMS delivery failed: {reason}" if reason else self.detail
        super().__init__(detail=detail, code=code)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

async def donor_service_exception_handler(
    request: Request,
    exc: DonorServiceError
) -> JSONResponse:
    """
    Handle DonorServiceError exceptions and return consistent JSON responses.
    """
    logger.warning(
        f"DonorServiceError: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "route": route_template(request),
            "method": request.method,
            "context": exc.context
        }
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def generic_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions with a generic error response.

    Logs the full exception for debugging but returns a safe error message.
    """
    logger.exception(
        f"Unhandled exception: {exc}",
        extra={
            "route": route_template(request),
            "method": request.method
        }
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Example:
        app = FastAPI()
        setup_exception_handlers(app)
    """
    app.add_exception_handler(DonorServiceError, donor_service_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
