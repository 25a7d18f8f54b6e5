"""
Tests for the listing API views.

- Browse with filters (public)
- Publish/update/remove (hosts, own listings)
- Reviews and wishlist actions
"""

from datetime import date
from decimal import Decimal

import pytest
from rest_framework import status

from authentication.tests.factories import HostFactory
from bookings.models import BookingStatus
from bookings.tests.factories import BookingFactory
from listings.models import Listing
from listings.tests.factories import ListingFactory, ReviewFactory


LISTINGS_URL = "/api/v1/listings/"


def detail_url(listing_id, suffix=""):
    return f"{LISTINGS_URL}{listing_id}/{suffix}"


def result_ids(response):
    return {item["id"] for item in response.data["results"]}


class TestListingBrowse:
    def test_public_list(self, api_client, listing):
        response = api_client.get(LISTINGS_URL)

        assert response.status_code == status.HTTP_200_OK
        item = response.data["results"][0]
        assert item["title"] == "Casa Azul"
        assert item["host"]["name"] == "Hana"
        assert item["is_saved"] is False

    def test_filters_by_location_and_price(self, api_client, host):
        lisbon = ListingFactory(host=host, location="Lisbon", rate=Decimal("90.00"))
        ListingFactory(host=host, location="Lisbon", rate=Decimal("300.00"))
        ListingFactory(host=host, location="Porto", rate=Decimal("90.00"))

        response = api_client.get(LISTINGS_URL, {"location": "lisb", "max_price": "100"})

        assert result_ids(response) == {lisbon.id}

    def test_filters_by_guest_count(self, api_client, host):
        big = ListingFactory(host=host, max_guests=8)
        ListingFactory(host=host, max_guests=2)

        response = api_client.get(LISTINGS_URL, {"guests": 6})

        assert result_ids(response) == {big.id}

    def test_amenities_must_all_match(self, api_client, host):
        full = ListingFactory(host=host, amenities=["wifi", "pool", "kitchen"])
        ListingFactory(host=host, amenities=["wifi"])

        response = api_client.get(LISTINGS_URL, {"amenities": "wifi, pool"})

        assert result_ids(response) == {full.id}

    def test_date_range_hides_booked_listings(self, api_client, host):
        booked = ListingFactory(host=host)
        free = ListingFactory(host=host)
        cancelled = ListingFactory(host=host)
        BookingFactory(listing=booked, check_in=date(2024, 6, 1), check_out=date(2024, 6, 5))
        BookingFactory(
            listing=cancelled,
            check_in=date(2024, 6, 1),
            check_out=date(2024, 6, 5),
            status=BookingStatus.CANCELLED,
        )

        response = api_client.get(
            LISTINGS_URL, {"check_in": "2024-06-03", "check_out": "2024-06-07"}
        )

        assert result_ids(response) == {free.id, cancelled.id}

    def test_back_to_back_range_is_available(self, api_client, host):
        listing = ListingFactory(host=host)
        BookingFactory(listing=listing, check_in=date(2024, 6, 1), check_out=date(2024, 6, 5))

        response = api_client.get(
            LISTINGS_URL, {"check_in": "2024-06-05", "check_out": "2024-06-08"}
        )

        assert result_ids(response) == {listing.id}

    def test_is_saved_for_viewer(self, client_for, listing, guest):
        listing.saved_by.add(guest)

        response = client_for(guest).get(detail_url(listing.id))

        assert response.data["is_saved"] is True


class TestListingWrite:
    payload = {
        "title": "Cabin in the woods",
        "location": "Sintra",
        "category": "cabin",
        "rate": "80.00",
        "max_guests": 3,
        "amenities": ["fireplace"],
    }

    def test_host_publishes(self, client_for, host):
        response = client_for(host).post(LISTINGS_URL, self.payload, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        listing = Listing.objects.get(pk=response.data["id"])
        assert listing.host == host
        assert listing.rating == Decimal("4.5")

    def test_publishes_map_position_and_capacity(self, client_for, host):
        payload = {
            **self.payload,
            "full_description": "Stone cabin under the pines.",
            "coordinates": {"lat": 38.79, "lng": -9.39},
            "bedrooms": 2,
            "beds": 3,
            "child_rate": "40.00",
        }

        response = client_for(host).post(LISTINGS_URL, payload, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["coordinates"] == {"lat": 38.79, "lng": -9.39}
        assert response.data["infant_rate"] is None
        listing = Listing.objects.get(pk=response.data["id"])
        assert (listing.latitude, listing.longitude) == (38.79, -9.39)
        assert (listing.bedrooms, listing.beds) == (2, 3)
        assert listing.child_rate == Decimal("40.00")

    def test_unplaced_listing_has_null_coordinates(self, client_for, host):
        response = client_for(host).post(LISTINGS_URL, self.payload, format="json")

        assert response.data["coordinates"] is None

    @pytest.mark.parametrize(
        "coordinates",
        [{"lat": 91, "lng": 0}, {"lat": 0, "lng": -181}, {"lat": "north"}, [38.7, -9.1]],
    )
    def test_invalid_coordinates_rejected(self, client_for, host, coordinates):
        response = client_for(host).post(
            LISTINGS_URL, {**self.payload, "coordinates": coordinates}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "coordinates" in response.data

    def test_guest_cannot_publish(self, client_for, guest):
        response = client_for(guest).post(LISTINGS_URL, self.payload, format="json")

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_anonymous_cannot_publish(self, api_client):
        response = api_client.post(LISTINGS_URL, self.payload, format="json")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_negative_rate_rejected(self, client_for, host):
        response = client_for(host).post(
            LISTINGS_URL, {**self.payload, "rate": "-1.00"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_other_host_cannot_update(self, client_for, listing):
        response = client_for(HostFactory()).patch(
            detail_url(listing.id), {"title": "Mine now"}, format="json"
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_owner_updates(self, client_for, listing, host):
        response = client_for(host).patch(
            detail_url(listing.id), {"rate": "150.00"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        listing.refresh_from_db()
        assert listing.rate == Decimal("150.00")

    def test_owner_deletes(self, client_for, listing, host):
        response = client_for(host).delete(detail_url(listing.id))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Listing.objects.filter(pk=listing.pk).exists()

    def test_listing_with_bookings_cannot_be_deleted(self, client_for, listing, host):
        BookingFactory(listing=listing)

        response = client_for(host).delete(detail_url(listing.id))

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "LISTING_CONFLICT"
        assert Listing.objects.filter(pk=listing.pk).exists()


class TestListingReviews:
    def test_public_list(self, api_client, listing):
        ReviewFactory(listing=listing, comment="Great light")

        response = api_client.get(detail_url(listing.id, "reviews/"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]["comment"] == "Great light"

    def test_post_requires_authentication(self, api_client, listing):
        response = api_client.post(detail_url(listing.id, "reviews/"), {"rating": 4})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_post_upserts(self, client_for, listing, guest):
        client = client_for(guest)

        client.post(detail_url(listing.id, "reviews/"), {"rating": 2}, format="json")
        response = client.post(
            detail_url(listing.id, "reviews/"), {"rating": 4, "comment": "Grew on me"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["rating"] == 4
        listing.refresh_from_db()
        assert listing.reviews_count == 1

    def test_comment_only_post_keeps_rating(self, client_for, listing, guest):
        client = client_for(guest)
        client.post(detail_url(listing.id, "reviews/"), {"rating": 2}, format="json")

        response = client.post(
            detail_url(listing.id, "reviews/"), {"comment": "Better now"}, format="json"
        )

        assert response.data["rating"] == 2
        assert response.data["comment"] == "Better now"
        listing.refresh_from_db()
        assert listing.rating == Decimal("2.0")

    def test_post_rejects_out_of_range(self, client_for, listing, guest):
        response = client_for(guest).post(
            detail_url(listing.id, "reviews/"), {"rating": 9}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_delete_own_review(self, client_for, listing, guest):
        review = ReviewFactory(listing=listing, author=guest)

        response = client_for(guest).delete(f"{LISTINGS_URL}reviews/{review.id}/")

        assert response.status_code == status.HTTP_204_NO_CONTENT

    def test_delete_someone_elses_review(self, client_for, listing, guest, host):
        review = ReviewFactory(listing=listing, author=guest)

        response = client_for(host).delete(f"{LISTINGS_URL}reviews/{review.id}/")

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestWishlist:
    def test_toggle_and_list(self, client_for, listing, guest):
        client = client_for(guest)

        saved = client.post(detail_url(listing.id, "wishlist/"))
        listed = client.get(f"{LISTINGS_URL}wishlist/")
        unsaved = client.post(detail_url(listing.id, "wishlist/"))

        assert saved.data == {"listing_id": listing.id, "saved": True}
        assert [item["id"] for item in listed.data] == [listing.id]
        assert listed.data[0]["is_saved"] is True
        assert unsaved.data["saved"] is False

    def test_requires_authentication(self, api_client, listing):
        response = api_client.post(detail_url(listing.id, "wishlist/"))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
