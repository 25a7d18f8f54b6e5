"""
Application error taxonomy.

Every failure a service can report maps onto one of these classes. Each
class carries a machine-readable ``default_error_code`` and the HTTP status
the API layer answers with, so views and WebSocket consumers translate
failures the same way.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Malformed or missing input, rejected before mutation
    ├── NotFoundError - Referenced listing/booking/message absent
    ├── PermissionDeniedError - Actor lacks permission for the target
    ├── ConflictError - State conflicts (overlapping bookings, ...)
    └── TransientStoreError - Storage unavailable, whole operation retryable

Usage:
    from core.exceptions import NotFoundError

    raise NotFoundError(
        f"Listing {listing_id} not found",
        error_code="LISTING_NOT_FOUND",
        details={"listing_id": listing_id},
    )

    # Services convert raised errors into ServiceResult failures:
    except BaseApplicationError as exc:
        return ServiceResult.from_exception(exc)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, ids, ...)
        status_code: HTTP status the API answers with
    """

    default_error_code: str = "APPLICATION_ERROR"
    status_code: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Example:
            {
                "error": "Listing 7 not found",
                "error_code": "LISTING_NOT_FOUND",
                "details": {"listing_id": 7}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input is malformed or missing.

    Example:
        if not content.strip():
            raise ValidationError(
                "Message content cannot be empty",
                details={"content": ["This field may not be blank."]},
            )
    """

    default_error_code: str = "VALIDATION_ERROR"
    status_code: int = 400


class NotFoundError(BaseApplicationError):
    """
    Raised when a referenced record does not exist.

    Prefer a specific code (``LISTING_NOT_FOUND``, ``BOOKING_NOT_FOUND``) so
    clients can tell which reference was wrong.
    """

    default_error_code: str = "NOT_FOUND"
    status_code: int = 404


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when the acting user may not touch the target resource.

    Authentication failures (missing/invalid token) stay with DRF's
    ``NotAuthenticated``; this is for authorization only.
    """

    default_error_code: str = "PERMISSION_DENIED"
    status_code: int = 403


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current resource state.

    Conflicts are reported to the caller as rejections and never resolved
    silently.
    """

    default_error_code: str = "CONFLICT"
    status_code: int = 409


class TransientStoreError(BaseApplicationError):
    """
    Raised when the database is unavailable.

    Operations that fail this way are wrapped in a single transaction, so no
    partial mutation is left behind and the caller may retry the whole call.
    """

    default_error_code: str = "STORE_UNAVAILABLE"
    status_code: int = 503


# Error code -> HTTP status, for codes that do not carry their class with them
# (ServiceResult failures only keep the code).
ERROR_STATUS_CODES: dict[str, int] = {
    ValidationError.default_error_code: ValidationError.status_code,
    NotFoundError.default_error_code: NotFoundError.status_code,
    PermissionDeniedError.default_error_code: PermissionDeniedError.status_code,
    ConflictError.default_error_code: ConflictError.status_code,
    TransientStoreError.default_error_code: TransientStoreError.status_code,
}


def status_for_error_code(error_code: str | None) -> int:
    """
    Resolve the HTTP status for a service error code.

    Specific codes fall back on their suffix: ``*_NOT_FOUND`` is a 404 and
    ``*_CONFLICT`` a 409. Anything unknown is a 400.
    """
    if not error_code:
        return 400
    if error_code in ERROR_STATUS_CODES:
        return ERROR_STATUS_CODES[error_code]
    if error_code.endswith("_NOT_FOUND"):
        return NotFoundError.status_code
    if error_code.endswith("_CONFLICT"):
        return ConflictError.status_code
    return 400
