"""
Tests for the booking API views.
"""

import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest
from django.db import connections
from rest_framework import status

from bookings.models import Booking, BookingStatus
from bookings.services import BookingService
from bookings.tests.factories import BookingFactory


BOOKINGS_URL = "/api/v1/bookings/"


def cancel_url(booking_id):
    return f"{BOOKINGS_URL}{booking_id}/cancel/"


def taken_dates_url(listing_id):
    return f"{BOOKINGS_URL}taken-dates/{listing_id}/"


class TestCreateBooking:
    def payload(self, listing, check_in="2024-06-01", check_out="2024-06-05"):
        return {
            "listing_id": listing.id,
            "check_in": check_in,
            "check_out": check_out,
            "total_price": "480.00",
        }

    def test_requires_authentication(self, api_client, listing):
        response = api_client.post(BOOKINGS_URL, self.payload(listing), format="json")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_creates_confirmed_booking(self, client_for, listing, guest):
        response = client_for(guest).post(BOOKINGS_URL, self.payload(listing), format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["status"] == "confirmed"
        assert response.data["guest_id"] == guest.id
        assert response.data["check_in"] == "2024-06-01"

    def test_overlap_returns_409(self, client_for, listing, guest, other_guest):
        client_for(guest).post(BOOKINGS_URL, self.payload(listing), format="json")

        response = client_for(other_guest).post(
            BOOKINGS_URL, self.payload(listing, "2024-06-03", "2024-06-07"), format="json"
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "DATES_UNAVAILABLE"
        assert "no longer available" in response.data["error"]

    def test_reversed_dates_return_400(self, client_for, listing, guest):
        response = client_for(guest).post(
            BOOKINGS_URL, self.payload(listing, "2024-06-05", "2024-06-01"), format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "VALIDATION_ERROR"
        assert "check_out" in response.data["errors"]

    def test_malformed_body_returns_400(self, client_for, listing, guest):
        response = client_for(guest).post(
            BOOKINGS_URL, {"listing_id": listing.id, "check_in": "soon"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_listing_returns_404(self, client_for, guest):
        response = client_for(guest).post(
            BOOKINGS_URL,
            {
                "listing_id": 999999,
                "check_in": "2024-06-01",
                "check_out": "2024-06-05",
                "total_price": "1.00",
            },
            format="json",
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestCancelBooking:
    def test_guest_cancels(self, client_for, listing, guest):
        booking = BookingFactory(listing=listing, guest=guest)

        response = client_for(guest).put(cancel_url(booking.id))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["status"] == "cancelled"

    def test_host_cancels(self, client_for, listing, guest, host):
        booking = BookingFactory(listing=listing, guest=guest)

        response = client_for(host).put(cancel_url(booking.id))

        assert response.status_code == status.HTTP_200_OK

    def test_outsider_gets_403(self, client_for, listing, guest, outsider):
        booking = BookingFactory(listing=listing, guest=guest)

        response = client_for(outsider).put(cancel_url(booking.id))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        booking.refresh_from_db()
        assert booking.status == BookingStatus.CONFIRMED

    def test_unknown_booking_gets_404(self, client_for, guest):
        response = client_for(guest).put(cancel_url(999999))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error_code"] == "BOOKING_NOT_FOUND"


class TestTakenDates:
    def test_public(self, api_client, listing):
        BookingFactory(listing=listing)
        BookingFactory(
            listing=listing,
            check_in=date(2024, 7, 1),
            check_out=date(2024, 7, 4),
            status=BookingStatus.CANCELLED,
        )

        response = api_client.get(taken_dates_url(listing.id))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == [{"check_in": "2024-06-01", "check_out": "2024-06-05"}]

    def test_unknown_listing_is_empty(self, api_client, db):
        response = api_client.get(taken_dates_url(999999))

        assert response.data == []


class TestBookingLists:
    def test_mine(self, client_for, listing, guest, other_guest):
        BookingFactory(listing=listing, guest=guest)
        BookingFactory(guest=other_guest)

        response = client_for(guest).get(f"{BOOKINGS_URL}mine/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 1
        row = response.data["results"][0]
        assert row["listing"]["title"] == "Casa Azul"
        assert row["listing"]["location"] == listing.location

    def test_hosting_shows_guest_contact(self, client_for, listing, guest, host):
        BookingFactory(listing=listing, guest=guest)

        response = client_for(host).get(f"{BOOKINGS_URL}hosting/")

        row = response.data["results"][0]
        assert row["guest"]["email"] == "gus@example.com"
        assert row["listing_title"] == "Casa Azul"

    def test_hosting_empty_for_guest(self, client_for, listing, guest):
        BookingFactory(listing=listing, guest=guest)

        response = client_for(guest).get(f"{BOOKINGS_URL}hosting/")

        assert response.data["count"] == 0


@pytest.mark.django_db(transaction=True)
class TestConcurrentBooking:
    """
    Simultaneous requests for the same nights, one thread per guest.

    PostgreSQL serializes them on the listing row lock. SQLite serializes
    writers itself and may refuse a competing transaction outright, which
    surfaces as STORE_UNAVAILABLE; those attempts are retried like a client
    would retry a 503.
    """

    @staticmethod
    def book_with_retries(listing_id, user, attempts=50):
        try:
            for _ in range(attempts):
                result = BookingService.create(
                    listing_id, user, date(2024, 6, 1), date(2024, 6, 5), "480.00"
                )
                if result.error_code != "STORE_UNAVAILABLE":
                    return result
                time.sleep(random.uniform(0.005, 0.05))
            return result
        finally:
            connections.close_all()

    def test_only_one_of_simultaneous_requests_wins(self, listing, guest, other_guest):
        """
        Why it matters: Two guests pressing "Book" at the same moment must
        not both get the same nights.
        """
        barrier = threading.Barrier(2)

        def attempt(user):
            barrier.wait()
            return self.book_with_retries(listing.id, user)

        with ThreadPoolExecutor(max_workers=2) as pool:
            results = list(pool.map(attempt, [guest, other_guest]))

        winners = [r for r in results if r.success]
        losers = [r for r in results if not r.success]
        assert len(winners) == 1
        assert [r.error_code for r in losers] == ["DATES_UNAVAILABLE"]
        assert losers[0].status_code == status.HTTP_409_CONFLICT
        assert Booking.objects.confirmed().filter(listing=listing).count() == 1

    def test_transient_failures_never_leave_a_booking(self, listing, guest, other_guest):
        def attempt(user):
            try:
                return BookingService.create(
                    listing.id, user, date(2024, 6, 1), date(2024, 6, 5), "480.00"
                )
            finally:
                connections.close_all()

        with ThreadPoolExecutor(max_workers=2) as pool:
            results = list(pool.map(attempt, [guest, other_guest]))

        for result in results:
            if not result.success:
                assert result.error_code in ("DATES_UNAVAILABLE", "STORE_UNAVAILABLE")
                assert result.status_code in (
                    status.HTTP_409_CONFLICT,
                    status.HTTP_503_SERVICE_UNAVAILABLE,
                )
        confirmed = Booking.objects.confirmed().filter(listing=listing).count()
        assert confirmed == sum(r.success for r in results)
        assert confirmed <= 1
