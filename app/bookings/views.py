"""
Views for the booking API.

Endpoints:
    POST /api/v1/bookings/                          - Book a listing
    PUT  /api/v1/bookings/{id}/cancel/              - Cancel (guest or host)
    GET  /api/v1/bookings/taken-dates/{listing_id}/ - Confirmed ranges (public)
    GET  /api/v1/bookings/mine/                     - Guest's bookings
    GET  /api/v1/bookings/hosting/                  - Bookings on my listings
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from bookings.serializers import (
    BookingCreateSerializer,
    BookingSerializer,
    GuestBookingSerializer,
    HostBookingSerializer,
    TakenDateSerializer,
)
from bookings.services import BookingService
from core.responses import error_response


class BookingViewSet(viewsets.GenericViewSet):
    """
    Booking ledger endpoints.

    Provides:
    - create: POST /
    - cancel: PUT /{id}/cancel/
    - taken_dates: GET /taken-dates/{listing_id}/
    - mine: GET /mine/
    - hosting: GET /hosting/
    """

    permission_classes = [IsAuthenticated]
    serializer_class = BookingSerializer
    lookup_value_regex = r"\d+"

    def get_permissions(self):
        if self.action == "taken_dates":
            return [AllowAny()]
        return super().get_permissions()

    @extend_schema(
        operation_id="create_booking",
        summary="Book a listing",
        request=BookingCreateSerializer,
        responses={
            201: BookingSerializer,
            400: OpenApiResponse(description="Invalid dates or price"),
            404: OpenApiResponse(description="Listing not found"),
            409: OpenApiResponse(description="Dates unavailable"),
            503: OpenApiResponse(description="Store unavailable, retry"),
        },
        tags=["Bookings"],
    )
    def create(self, request):
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = BookingService.create(
            listing_id=data["listing_id"],
            guest=request.user,
            check_in=data["check_in"],
            check_out=data["check_out"],
            total_price=data["total_price"],
        )
        if not result.success:
            return error_response(result)

        return Response(BookingSerializer(result.data).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="cancel_booking",
        summary="Cancel a booking",
        request=None,
        responses={
            200: BookingSerializer,
            403: OpenApiResponse(description="Not the guest or host"),
            404: OpenApiResponse(description="Booking not found"),
        },
        tags=["Bookings"],
    )
    @action(detail=True, methods=["put"])
    def cancel(self, request, pk=None):
        result = BookingService.cancel(booking_id=pk, actor=request.user)
        if not result.success:
            return error_response(result)

        return Response(BookingSerializer(result.data).data)

    @extend_schema(
        operation_id="get_taken_dates",
        summary="Confirmed date ranges of a listing",
        responses={200: TakenDateSerializer(many=True)},
        tags=["Bookings"],
    )
    @action(
        detail=False,
        methods=["get"],
        url_path=r"taken-dates/(?P<listing_id>\d+)",
    )
    def taken_dates(self, request, listing_id=None):
        ranges = BookingService.taken_dates(int(listing_id))
        return Response(TakenDateSerializer(ranges, many=True).data)

    @extend_schema(
        operation_id="list_my_bookings",
        summary="My bookings",
        responses={200: GuestBookingSerializer(many=True)},
        tags=["Bookings"],
    )
    @action(detail=False, methods=["get"])
    def mine(self, request):
        bookings = BookingService.my_bookings(request.user)
        page = self.paginate_queryset(bookings)
        if page is not None:
            return self.get_paginated_response(GuestBookingSerializer(page, many=True).data)
        return Response(GuestBookingSerializer(bookings, many=True).data)

    @extend_schema(
        operation_id="list_hosting_bookings",
        summary="Bookings on my listings",
        responses={200: HostBookingSerializer(many=True)},
        tags=["Bookings"],
    )
    @action(detail=False, methods=["get"])
    def hosting(self, request):
        bookings = BookingService.host_bookings(request.user)
        page = self.paginate_queryset(bookings)
        if page is not None:
            return self.get_paginated_response(HostBookingSerializer(page, many=True).data)
        return Response(HostBookingSerializer(bookings, many=True).data)
