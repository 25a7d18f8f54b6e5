"""
Serializers for the listing API.

Serializer Hierarchy:
    CoordinatesField: Nested map position over latitude/longitude
    ListingSerializer: Listing with host summary and the viewer's saved flag
    ReviewSerializer: Review with author summary
    ReviewCreateSerializer: Body of POST /listings/{id}/reviews/
    WishlistToggleSerializer: Saved state after a toggle
"""

from __future__ import annotations

from decimal import Decimal

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from authentication.serializers import UserSummarySerializer
from listings.models import Listing, Review


@extend_schema_field(OpenApiTypes.OBJECT)
class CoordinatesField(serializers.Field):
    """
    Map position as {"lat": ..., "lng": ...}, stored on latitude/longitude.

    Reads the whole listing (source="*") and renders null for listings that
    have not been placed on the map.
    """

    default_error_messages = {
        "invalid": 'Expected an object with numeric "lat" and "lng".',
        "out_of_range": "lat must be within [-90, 90] and lng within [-180, 180].",
    }

    def __init__(self, **kwargs):
        kwargs["source"] = "*"
        super().__init__(**kwargs)

    def to_representation(self, listing):
        return listing.coordinates

    def to_internal_value(self, data):
        if not isinstance(data, dict):
            self.fail("invalid")
        lat, lng = data.get("lat"), data.get("lng")
        for value in (lat, lng):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                self.fail("invalid")
        if not (-90 <= lat <= 90 and -180 <= lng <= 180):
            self.fail("out_of_range")
        return {"latitude": float(lat), "longitude": float(lng)}


class ListingSerializer(serializers.ModelSerializer):
    """
    Listing read/write serializer.

    ``host``, ``rating`` and ``reviews_count`` are managed by the server.
    """

    host = UserSummarySerializer(read_only=True)
    is_saved = serializers.SerializerMethodField()
    amenities = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    images = serializers.ListField(child=serializers.URLField(), required=False)
    rate = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"))
    coordinates = CoordinatesField(required=False)

    class Meta:
        model = Listing
        fields = [
            "id",
            "host",
            "title",
            "description",
            "full_description",
            "location",
            "coordinates",
            "category",
            "rate",
            "child_rate",
            "infant_rate",
            "max_guests",
            "bedrooms",
            "beds",
            "amenities",
            "images",
            "rating",
            "reviews_count",
            "is_saved",
            "created_at",
        ]
        read_only_fields = ["id", "host", "rating", "reviews_count", "created_at"]

    def get_is_saved(self, obj: Listing) -> bool:
        request = self.context.get("request")
        if request is None or not request.user.is_authenticated:
            return False
        saved_ids = self.context.get("saved_ids")
        if saved_ids is not None:
            return obj.id in saved_ids
        return obj.saved_by.filter(pk=request.user.pk).exists()


class ReviewSerializer(serializers.ModelSerializer):
    author = UserSummarySerializer(read_only=True)
    listing_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Review
        fields = ["id", "listing_id", "author", "rating", "comment", "created_at", "updated_at"]
        read_only_fields = fields


class ReviewCreateSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5, required=False)
    comment = serializers.CharField(allow_blank=True, required=False)


class WishlistToggleSerializer(serializers.Serializer):
    listing_id = serializers.IntegerField(read_only=True)
    saved = serializers.BooleanField(read_only=True)
