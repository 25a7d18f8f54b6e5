"""
Serializers for the notification API.

Serializers:
    NotificationSerializer: Read-only notification shape (also pushed over the socket)
    UnreadCountSerializer: Response for the unread count endpoint
    MarkAllReadResponseSerializer: Response for the read-all endpoint
"""

from __future__ import annotations

from rest_framework import serializers

from notifications.models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    """Notification as shown in the feed."""

    type = serializers.CharField(source="notification_type", read_only=True)

    class Meta:
        model = Notification
        fields = [
            "id",
            "type",
            "title",
            "message",
            "link",
            "is_read",
            "created_at",
        ]
        read_only_fields = fields


class UnreadCountSerializer(serializers.Serializer):
    """Response for GET /unread-count/."""

    unread_count = serializers.IntegerField(read_only=True)


class MarkAllReadResponseSerializer(serializers.Serializer):
    """Response for PUT /read-all/."""

    marked_count = serializers.IntegerField(read_only=True)
