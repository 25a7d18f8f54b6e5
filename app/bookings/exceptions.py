"""
Booking-specific exceptions.

Exception Hierarchy:
    BookingConflictError - Requested dates overlap a confirmed booking
                           (inherits ConflictError, HTTP 409)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import ConflictError

if TYPE_CHECKING:
    from typing import Any


class BookingConflictError(ConflictError):
    """
    Raised when a booking would overlap a confirmed booking of the listing.

    Example:
        raise BookingConflictError(details={"listing_id": 3})
    """

    default_message: str = (
        "These dates are no longer available. Please choose different dates."
    )
    default_error_code: str = "DATES_UNAVAILABLE"

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message or self.default_message, error_code, details)
