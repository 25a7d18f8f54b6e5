"""
Booking ledger service layer.

Services:
    BookingService: Create, cancel and query bookings

Concurrency:
    create() and cancel() run inside one transaction that starts by locking
    the listing row (bookings.locks.lock_listing). Two requests for the same
    listing therefore run one after the other: the second sees the first's
    booking in its overlap check. Requests for different listings do not
    wait on each other.

Side effects (after commit only):
    - Notifications to guest and host
    - Confirmation / cancellation e-mail tasks
    A failing side effect is logged and never undoes the booking.

Usage:
    from bookings.services import BookingService

    result = BookingService.create(listing.id, guest, check_in, check_out, price)
    if not result.success:
        return error_response(result)   # 409 DATES_UNAVAILABLE, 404, 400, 503

    BookingService.cancel(booking.id, actor=host)
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from django.db import OperationalError

from bookings.exceptions import BookingConflictError
from bookings.locks import lock_listing
from bookings.models import Booking, BookingStatus
from core.exceptions import (
    BaseApplicationError,
    NotFoundError,
    PermissionDeniedError,
    TransientStoreError,
    ValidationError,
)
from core.services import BaseService, ServiceResult
from notifications.models import NotificationType
from notifications.services import NotificationService

if TYPE_CHECKING:
    from authentication.models import User


class BookingService(BaseService):
    """
    Service for the booking ledger.

    Methods:
        create: Confirm a booking if the dates are free
        cancel: Cancel a booking (guest or host)
        taken_dates: Confirmed date ranges of a listing
        unavailable_listing_ids: Listings with a confirmed overlap
        my_bookings: Bookings made by a guest
        host_bookings: Bookings on a host's listings
    """

    @classmethod
    def create(
        cls,
        listing_id,
        guest: User,
        check_in,
        check_out,
        total_price,
    ) -> ServiceResult[Booking]:
        """
        Book a listing for [check_in, check_out).

        Args:
            listing_id: Listing to book
            guest: Booking user
            check_in: Arrival date
            check_out: Departure date, strictly after check_in
            total_price: Non-negative price of the stay

        Returns:
            ServiceResult with the confirmed Booking

        Error codes:
            VALIDATION_ERROR: Dates missing or not increasing, bad price
            LISTING_NOT_FOUND: Listing does not exist
            DATES_UNAVAILABLE: Overlaps a confirmed booking
            STORE_UNAVAILABLE: Database unavailable; nothing was written
        """
        try:
            cls._validate_request(check_in, check_out, total_price)

            with cls.atomic():
                listing = lock_listing(listing_id)

                overlap = (
                    Booking.objects.confirmed()
                    .filter(listing=listing)
                    .overlapping(check_in, check_out)
                )
                if overlap.exists():
                    raise BookingConflictError(
                        details={
                            "listing_id": listing.id,
                            "check_in": check_in.isoformat(),
                            "check_out": check_out.isoformat(),
                        }
                    )

                booking = Booking.objects.create(
                    listing=listing,
                    guest=guest,
                    check_in=check_in,
                    check_out=check_out,
                    total_price=Decimal(str(total_price)),
                    status=BookingStatus.CONFIRMED,
                )
                cls.on_commit(lambda: cls._after_create(booking))

        except BaseApplicationError as exc:
            return cls.handle_exception(exc, f"Booking by user {guest.id}")
        except OperationalError as exc:
            cls.get_logger().error(
                f"Booking by user {guest.id} failed: database unavailable",
                exc_info=True,
            )
            return ServiceResult.from_exception(
                TransientStoreError(f"Booking could not be stored: {exc}")
            )

        cls.get_logger().info(
            f"Booking {booking.id} confirmed: listing {listing.id}, "
            f"guest {guest.id}, {check_in}..{check_out}"
        )
        return ServiceResult.success(booking)

    @classmethod
    def cancel(cls, booking_id, actor: User) -> ServiceResult[Booking]:
        """
        Cancel a booking.

        Only the booking's guest or the listing's host may cancel. Cancelling
        an already cancelled booking rewrites the same status.

        Error codes:
            BOOKING_NOT_FOUND: Booking does not exist
            PERMISSION_DENIED: Actor is neither guest nor host
            STORE_UNAVAILABLE: Database unavailable; nothing was written
        """
        try:
            listing_id = (
                Booking.objects.filter(pk=booking_id)
                .values_list("listing_id", flat=True)
                .first()
            )
            if listing_id is None:
                raise NotFoundError(
                    f"Booking {booking_id} not found",
                    error_code="BOOKING_NOT_FOUND",
                )

            with cls.atomic():
                listing = lock_listing(listing_id)
                booking = Booking.objects.select_related("guest").get(pk=booking_id)
                booking.listing = listing

                if actor.id not in (booking.guest_id, listing.host_id):
                    raise PermissionDeniedError(
                        "Only the guest or the host can cancel this booking",
                        details={"booking_id": booking.id},
                    )

                booking.status = BookingStatus.CANCELLED
                booking.save(update_fields=["status", "updated_at"])
                cls.on_commit(lambda: cls._after_cancel(booking, actor))

        except BaseApplicationError as exc:
            return cls.handle_exception(exc, f"Cancellation by user {actor.id}")
        except OperationalError as exc:
            cls.get_logger().error(
                f"Cancellation of booking {booking_id} failed: database unavailable",
                exc_info=True,
            )
            return ServiceResult.from_exception(
                TransientStoreError(f"Booking could not be cancelled: {exc}")
            )

        cls.get_logger().info(f"Booking {booking.id} cancelled by user {actor.id}")
        return ServiceResult.success(booking)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @classmethod
    def taken_dates(cls, listing_id) -> list[dict]:
        """Confirmed [check_in, check_out) ranges of a listing, by arrival."""
        return list(
            Booking.objects.confirmed()
            .filter(listing_id=listing_id)
            .order_by("check_in")
            .values("check_in", "check_out")
        )

    @classmethod
    def unavailable_listing_ids(cls, check_in, check_out):
        """Listings with a confirmed booking overlapping [check_in, check_out)."""
        return (
            Booking.objects.confirmed()
            .overlapping(check_in, check_out)
            .values("listing_id")
        )

    @classmethod
    def my_bookings(cls, user: User):
        return (
            Booking.objects.filter(guest=user)
            .select_related("listing")
            .order_by("-created_at", "-id")
        )

    @classmethod
    def host_bookings(cls, user: User):
        return (
            Booking.objects.filter(listing__host=user)
            .select_related("listing", "guest")
            .order_by("-created_at", "-id")
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_request(check_in, check_out, total_price) -> None:
        errors: dict[str, list[str]] = {}

        if not isinstance(check_in, date):
            errors["check_in"] = ["A valid date is required."]
        if not isinstance(check_out, date):
            errors["check_out"] = ["A valid date is required."]
        if not errors and check_out <= check_in:
            errors["check_out"] = ["Check-out must be after check-in."]

        try:
            price = Decimal(str(total_price))
        except (InvalidOperation, ValueError):
            errors["total_price"] = ["A valid number is required."]
        else:
            if not price.is_finite() or price < 0:
                errors["total_price"] = ["Price cannot be negative."]

        if errors:
            raise ValidationError("Invalid booking request", details=errors)

    @classmethod
    def _after_create(cls, booking: Booking) -> None:
        listing = booking.listing
        dates = f"{booking.check_in:%b %d} - {booking.check_out:%b %d, %Y}"

        NotificationService.notify(
            recipient_id=booking.guest_id,
            notification_type=NotificationType.BOOKING,
            title="Booking confirmed",
            message=f"Your stay at {listing.title} for {dates} is confirmed.",
            link="/bookings",
        )
        NotificationService.notify(
            recipient_id=listing.host_id,
            notification_type=NotificationType.BOOKING,
            title="New booking",
            message=f"{booking.guest.get_full_name()} booked {listing.title} for {dates}.",
            link="/hosting/bookings",
        )
        cls._enqueue_email("send_booking_confirmation_email", booking.id)

    @classmethod
    def _after_cancel(cls, booking: Booking, actor: User) -> None:
        listing = booking.listing
        if actor.id == booking.guest_id:
            recipient_id = listing.host_id
            message = f"{actor.get_full_name()} cancelled their stay at {listing.title}."
            link = "/hosting/bookings"
        else:
            recipient_id = booking.guest_id
            message = f"Your stay at {listing.title} was cancelled by the host."
            link = "/bookings"

        NotificationService.notify(
            recipient_id=recipient_id,
            notification_type=NotificationType.BOOKING,
            title="Booking cancelled",
            message=message,
            link=link,
        )
        cls._enqueue_email("send_booking_cancellation_email", booking.id)

    @classmethod
    def _enqueue_email(cls, task_name: str, booking_id: int) -> None:
        """Queue an e-mail task; a broker outage is logged, not raised."""
        from bookings import tasks

        try:
            getattr(tasks, task_name).delay(booking_id)
        except Exception:
            cls.get_logger().warning(
                f"Could not queue {task_name} for booking {booking_id}",
                exc_info=True,
            )
