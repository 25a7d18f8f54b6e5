"""
Views for the notification feed.

Endpoints:
    GET /api/v1/notifications/              - Most recent notifications (newest first)
    GET /api/v1/notifications/unread-count/ - Badge count
    PUT /api/v1/notifications/read-all/     - Mark every notification as read

Usage:
    router = SimpleRouter()
    router.register(r"", NotificationViewSet, basename="notification")
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from notifications.serializers import (
    MarkAllReadResponseSerializer,
    NotificationSerializer,
    UnreadCountSerializer,
)
from notifications.services import NotificationService


class NotificationViewSet(viewsets.GenericViewSet):
    """
    Notification feed of the authenticated user.

    Provides:
    - list: GET / - Recent notifications (capped, not paginated)
    - unread_count: GET /unread-count/
    - read_all: PUT /read-all/ (POST accepted too)

    Users only ever see their own notifications.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = NotificationSerializer
    pagination_class = None

    @extend_schema(
        operation_id="list_notifications",
        summary="List recent notifications",
        parameters=[
            OpenApiParameter(
                name="limit",
                type=int,
                location=OpenApiParameter.QUERY,
                description="Maximum number of notifications (default 20, max 100)",
                required=False,
            ),
        ],
        responses={200: NotificationSerializer(many=True)},
        tags=["Notifications"],
    )
    def list(self, request):
        try:
            limit = max(min(int(request.query_params.get("limit", 0)), 100), 0)
        except ValueError:
            limit = 0

        notifications = NotificationService.list_recent(request.user, limit=limit or None)
        serializer = self.get_serializer(notifications, many=True)
        return Response(serializer.data)

    @extend_schema(
        operation_id="get_unread_notification_count",
        summary="Get unread notification count",
        responses={200: UnreadCountSerializer},
        tags=["Notifications"],
    )
    @action(detail=False, methods=["get"], url_path="unread-count")
    def unread_count(self, request):
        """
        Returns:
            {"unread_count": <int>}
        """
        count = NotificationService.unread_count(request.user)
        return Response(UnreadCountSerializer({"unread_count": count}).data)

    @extend_schema(
        operation_id="mark_all_notifications_read",
        summary="Mark all notifications as read",
        request=None,
        responses={200: MarkAllReadResponseSerializer},
        tags=["Notifications"],
    )
    @action(detail=False, methods=["put", "post"], url_path="read-all")
    def read_all(self, request):
        """
        Idempotent; a second call reports 0.

        Returns:
            {"marked_count": <int>}
        """
        result = NotificationService.mark_all_read(request.user)
        return Response(MarkAllReadResponseSerializer({"marked_count": result.data}).data)
