"""
Serializers for the booking API.

Serializer Hierarchy:
    BookingCreateSerializer: Body of POST /bookings/
    BookingSerializer: Booking with listing and guest ids
    GuestBookingSerializer: "My trips" row (listing title, images, location)
    HostBookingSerializer: Hosting row (guest name and e-mail)
    TakenDateSerializer: One confirmed [check_in, check_out) range
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from authentication.serializers import UserContactSerializer
from bookings.models import Booking


class BookingCreateSerializer(serializers.Serializer):
    """
    Shape check for a booking request.

    Ordering of the dates and the price sign are checked by BookingService
    so every caller gets the same VALIDATION_ERROR.
    """

    listing_id = serializers.IntegerField()
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    total_price = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal("0"),
    )


class BookingSerializer(serializers.ModelSerializer):
    listing_id = serializers.IntegerField(read_only=True)
    guest_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "listing_id",
            "guest_id",
            "check_in",
            "check_out",
            "total_price",
            "status",
            "created_at",
        ]
        read_only_fields = fields


class BookedListingSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    title = serializers.CharField(read_only=True)
    images = serializers.ListField(child=serializers.CharField(), read_only=True)
    location = serializers.CharField(read_only=True)


class GuestBookingSerializer(BookingSerializer):
    """Booking as listed under the guest's trips."""

    listing = BookedListingSerializer(read_only=True)

    class Meta(BookingSerializer.Meta):
        fields = BookingSerializer.Meta.fields + ["listing"]
        read_only_fields = fields


class HostBookingSerializer(BookingSerializer):
    """Booking as listed for the host, with the guest's contact details."""

    guest = UserContactSerializer(read_only=True)
    listing_title = serializers.CharField(source="listing.title", read_only=True)

    class Meta(BookingSerializer.Meta):
        fields = BookingSerializer.Meta.fields + ["guest", "listing_title"]
        read_only_fields = fields


class TakenDateSerializer(serializers.Serializer):
    check_in = serializers.DateField(read_only=True)
    check_out = serializers.DateField(read_only=True)
