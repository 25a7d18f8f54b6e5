"""
Views for the listing directory, reviews and wishlist.

Endpoints:
    GET    /api/v1/listings/                 - Browse (public, filterable)
    POST   /api/v1/listings/                 - Publish (hosts)
    GET    /api/v1/listings/{id}/            - Detail (public)
    PATCH  /api/v1/listings/{id}/            - Update (own listings)
    DELETE /api/v1/listings/{id}/            - Remove (own listings)
    GET    /api/v1/listings/{id}/reviews/    - Reviews, newest first (public)
    POST   /api/v1/listings/{id}/reviews/    - Create or update my review
    POST   /api/v1/listings/{id}/wishlist/   - Toggle saved state
    GET    /api/v1/listings/wishlist/        - My saved listings
    DELETE /api/v1/listings/reviews/{id}/    - Delete my review
"""

from __future__ import annotations

import logging

from django.db.models import ProtectedError
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from core.responses import error_response
from core.services import ServiceResult
from listings.filters import ListingFilter
from listings.models import Listing
from listings.permissions import IsHostOrReadOnly, IsListingHostOrReadOnly
from listings.serializers import (
    ListingSerializer,
    ReviewCreateSerializer,
    ReviewSerializer,
    WishlistToggleSerializer,
)
from listings.services import ReviewService, WishlistService

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(summary="Browse listings", tags=["Listings"]),
    retrieve=extend_schema(summary="Listing detail", tags=["Listings"]),
    create=extend_schema(summary="Publish a listing", tags=["Listings"]),
    partial_update=extend_schema(summary="Update a listing", tags=["Listings"]),
    destroy=extend_schema(summary="Remove a listing", tags=["Listings"]),
)
class ListingViewSet(viewsets.ModelViewSet):
    """
    Listing directory.

    Reads are public. Users with the host role publish listings and manage
    their own.
    """

    serializer_class = ListingSerializer
    permission_classes = [IsHostOrReadOnly, IsListingHostOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_class = ListingFilter
    ordering_fields = ["rate", "rating", "created_at"]
    ordering = ["-created_at"]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        return Listing.objects.select_related("host")

    def get_permissions(self):
        if self.action in ("reviews", "wishlist", "toggle_wishlist"):
            if self.request.method in ("GET", "HEAD", "OPTIONS") and self.action == "reviews":
                return [AllowAny()]
            return [IsAuthenticated()]
        return super().get_permissions()

    def get_serializer_context(self):
        context = super().get_serializer_context()
        user = self.request.user
        if user.is_authenticated:
            context["saved_ids"] = set(user.wishlist.values_list("id", flat=True))
        return context

    def perform_create(self, serializer):
        listing = serializer.save(host=self.request.user)
        logger.info(f"User {self.request.user.id} published listing {listing.id}")

    def perform_update(self, serializer):
        listing = serializer.save()
        logger.info(f"User {self.request.user.id} updated listing {listing.id}")

    def destroy(self, request, *args, **kwargs):
        listing = self.get_object()
        try:
            listing.delete()
        except ProtectedError:
            return error_response(
                ServiceResult.failure(
                    "Listings with bookings cannot be removed",
                    error_code="LISTING_CONFLICT",
                )
            )
        logger.info(f"User {request.user.id} removed listing {kwargs['pk']}")
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        methods=["GET"],
        operation_id="list_listing_reviews",
        summary="Reviews of a listing",
        responses={200: ReviewSerializer(many=True)},
        tags=["Reviews"],
    )
    @extend_schema(
        methods=["POST"],
        operation_id="upsert_listing_review",
        summary="Create or update my review",
        request=ReviewCreateSerializer,
        responses={
            200: ReviewSerializer,
            404: OpenApiResponse(description="Listing not found"),
        },
        tags=["Reviews"],
    )
    @action(detail=True, methods=["get", "post"])
    def reviews(self, request, pk=None):
        if request.method == "GET":
            reviews = ReviewService.list_for_listing(pk)
            return Response(ReviewSerializer(reviews, many=True).data)

        serializer = ReviewCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ReviewService.upsert_review(
            listing_id=pk,
            author=request.user,
            rating=serializer.validated_data.get("rating"),
            comment=serializer.validated_data.get("comment"),
        )
        if not result.success:
            return error_response(result)

        return Response(ReviewSerializer(result.data).data)

    @extend_schema(
        operation_id="toggle_wishlist",
        summary="Save or unsave a listing",
        request=None,
        responses={
            200: WishlistToggleSerializer,
            404: OpenApiResponse(description="Listing not found"),
        },
        tags=["Wishlist"],
    )
    @action(detail=True, methods=["post"], url_path="wishlist", url_name="toggle-wishlist")
    def toggle_wishlist(self, request, pk=None):
        result = WishlistService.toggle(request.user, pk)
        if not result.success:
            return error_response(result)

        return Response(
            WishlistToggleSerializer({"listing_id": int(pk), "saved": result.data}).data
        )

    @extend_schema(
        operation_id="list_wishlist",
        summary="My saved listings",
        responses={200: ListingSerializer(many=True)},
        tags=["Wishlist"],
    )
    @action(detail=False, methods=["get"])
    def wishlist(self, request):
        listings = WishlistService.saved_listings(request.user)
        serializer = self.get_serializer(listings, many=True)
        return Response(serializer.data)


class ReviewViewSet(viewsets.GenericViewSet):
    """Deletion of a review by its author."""

    permission_classes = [IsAuthenticated]
    serializer_class = ReviewSerializer
    lookup_value_regex = r"\d+"

    @extend_schema(
        operation_id="delete_review",
        summary="Delete my review",
        responses={
            204: None,
            403: OpenApiResponse(description="Not the author"),
            404: OpenApiResponse(description="Review not found"),
        },
        tags=["Reviews"],
    )
    def destroy(self, request, pk=None):
        result = ReviewService.delete_review(pk, request.user)
        if not result.success:
            return error_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)
