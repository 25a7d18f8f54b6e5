"""
Booking ledger models.

Models:
    Booking: A guest's stay at a listing over [check_in, check_out)

Invariant:
    For any listing, confirmed bookings never overlap. Two stays [a, b) and
    [c, d) overlap iff a < d and c < b, so back-to-back stays (one checks out
    the day the next checks in) are allowed. The invariant is enforced by
    BookingService under a row lock on the listing; the database only checks
    that each interval is non-empty.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import F, Q

from core.models import BaseModel


class BookingStatus(models.TextChoices):
    """
    Booking lifecycle.

    Bookings are created CONFIRMED; the only transition is
    CONFIRMED -> CANCELLED. PENDING is reserved for a future payment step.
    """

    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    CANCELLED = "cancelled", "Cancelled"


class BookingQuerySet(models.QuerySet):
    def confirmed(self):
        return self.filter(status=BookingStatus.CONFIRMED)

    def overlapping(self, check_in, check_out):
        """Bookings whose [check_in, check_out) intersects the given range."""
        return self.filter(check_in__lt=check_out, check_out__gt=check_in)


class Booking(BaseModel):
    """
    A reservation of a listing by a guest.

    Fields:
        listing: Booked listing
        guest: User who booked
        check_in: First night
        check_out: Departure day (exclusive)
        total_price: Price agreed at booking time
        status: BookingStatus
    """

    listing = models.ForeignKey(
        "listings.Listing",
        on_delete=models.PROTECT,
        related_name="bookings",
        help_text="Booked listing",
    )

    guest = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="bookings",
        help_text="Guest who made the booking",
    )

    check_in = models.DateField(help_text="Arrival date")

    check_out = models.DateField(help_text="Departure date (exclusive)")

    total_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="Total price for the stay",
    )

    status = models.CharField(
        max_length=20,
        choices=BookingStatus.choices,
        default=BookingStatus.CONFIRMED,
        db_index=True,
        help_text="Booking status",
    )

    objects = BookingQuerySet.as_manager()

    class Meta:
        db_table = "bookings_booking"
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(check_out__gt=F("check_in")),
                name="booking_checkout_after_checkin",
            ),
        ]
        indexes = [
            # Overlap checks and taken dates
            models.Index(
                fields=["listing", "status", "check_in"],
                name="booking_listing_dates_idx",
            ),
            models.Index(fields=["guest", "-created_at"], name="booking_guest_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.id}: listing {self.listing_id} {self.check_in}..{self.check_out} ({self.status})"

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    @property
    def is_cancelled(self) -> bool:
        return self.status == BookingStatus.CANCELLED
