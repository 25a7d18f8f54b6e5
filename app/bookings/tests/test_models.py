"""
Tests for the Booking model and its queryset.
"""

from datetime import date

import pytest
from django.db import IntegrityError

from bookings.models import Booking, BookingStatus
from bookings.tests.factories import BookingFactory


class TestBookingModel:
    def test_nights(self, listing):
        booking = BookingFactory(listing=listing)

        assert booking.nights == 4
        assert booking.is_cancelled is False

    def test_defaults_to_confirmed(self, listing, guest):
        booking = Booking.objects.create(
            listing=listing,
            guest=guest,
            check_in=date(2024, 6, 1),
            check_out=date(2024, 6, 2),
            total_price="120.00",
        )

        assert booking.status == BookingStatus.CONFIRMED

    def test_checkout_must_follow_checkin(self, listing):
        with pytest.raises(IntegrityError):
            BookingFactory(listing=listing, check_in=date(2024, 6, 5), check_out=date(2024, 6, 5))


class TestBookingQuerySet:
    @pytest.mark.parametrize(
        "check_in, check_out, overlaps",
        [
            (date(2024, 6, 3), date(2024, 6, 7), True),
            (date(2024, 5, 28), date(2024, 6, 2), True),
            (date(2024, 6, 2), date(2024, 6, 3), True),
            (date(2024, 5, 20), date(2024, 6, 30), True),
            # Half-open ranges: same-day turnover is allowed
            (date(2024, 6, 5), date(2024, 6, 8), False),
            (date(2024, 5, 28), date(2024, 6, 1), False),
        ],
    )
    def test_overlapping(self, listing, check_in, check_out, overlaps):
        BookingFactory(listing=listing, check_in=date(2024, 6, 1), check_out=date(2024, 6, 5))

        assert Booking.objects.overlapping(check_in, check_out).exists() is overlaps

    def test_confirmed_excludes_cancelled(self, listing):
        kept = BookingFactory(listing=listing)
        BookingFactory(listing=listing, status=BookingStatus.CANCELLED)

        assert list(Booking.objects.confirmed()) == [kept]
