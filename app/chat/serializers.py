"""
Serializers for the chat API and WebSocket payloads.

Serializer Hierarchy:
    MessageSerializer: Message with the sender's public identity
    MessageCreateSerializer: Body of an HTTP send
    ThreadListingSerializer: Listing fields shown on an inbox row
    ThreadSerializer: Inbox row (listing, guest, last message, unread count)
    MarkReadResponseSerializer: Response of the mark-read command

Design Decisions:
    - The same MessageSerializer output is returned by history, pushed as
      message_received/alert, and embedded in inbox rows
    - Read and write serializers are separate
"""

from __future__ import annotations

from rest_framework import serializers

from authentication.serializers import UserSummarySerializer
from chat.constants import MESSAGE_CONFIG
from chat.models import Message
from listings.models import Listing


class MessageSerializer(serializers.ModelSerializer):
    """
    Message with the sender's identity.

    Example:
        {
            "id": 12,
            "listing_id": 3,
            "guest_id": 7,
            "sender": {"id": 7, "name": "Gus", "avatar": "", "role": "guest"},
            "content": "Hi",
            "is_read": false,
            "timestamp": "2024-05-30T10:00:00Z"
        }
    """

    listing_id = serializers.IntegerField(read_only=True)
    guest_id = serializers.IntegerField(read_only=True)
    sender = UserSummarySerializer(read_only=True)
    timestamp = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Message
        fields = [
            "id",
            "listing_id",
            "guest_id",
            "sender",
            "content",
            "is_read",
            "timestamp",
        ]
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    """
    Body of POST .../messages/.

    Blank content passes here and is rejected by the message store, so HTTP
    and WebSocket sends fail with the same error code.
    """

    content = serializers.CharField(
        allow_blank=True,
        trim_whitespace=False,
        max_length=MESSAGE_CONFIG.MAX_CONTENT_LENGTH * 2,
    )


class ThreadListingSerializer(serializers.ModelSerializer):
    """Listing as shown on an inbox row."""

    host = UserSummarySerializer(read_only=True)

    class Meta:
        model = Listing
        fields = ["id", "title", "images", "host"]
        read_only_fields = fields


class ThreadSerializer(serializers.Serializer):
    """Serializer for chat.services.Thread."""

    listing = ThreadListingSerializer(read_only=True)
    guest = UserSummarySerializer(read_only=True)
    last_message = MessageSerializer(read_only=True)
    unread_count = serializers.IntegerField(read_only=True)


class MarkReadResponseSerializer(serializers.Serializer):
    """Response for PUT .../read/."""

    marked_count = serializers.IntegerField(read_only=True)
