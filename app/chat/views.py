"""
Views for the chat API.

URL Structure:
    /api/v1/chat/inbox/                                         GET
    /api/v1/chat/threads/{listing_id}/{guest_id}/messages/      GET, POST
    /api/v1/chat/threads/{listing_id}/{guest_id}/read/          PUT

Design Decisions:
    - A thread has no row of its own; it is addressed by (listing_id, guest_id)
    - Access is checked by ConversationService.resolve_thread for every
      thread endpoint (guest of the thread or host of the listing)
    - HTTP sends deliver over the same realtime rooms as WebSocket sends
    - History and inbox are plain lists; clients re-fetch them after a
      reconnect to catch up on anything pushed while offline
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from chat.realtime import RealtimeChannel
from chat.serializers import (
    MarkReadResponseSerializer,
    MessageCreateSerializer,
    MessageSerializer,
    ThreadSerializer,
)
from chat.services import ConversationService, InboxService, MessageService
from core.responses import error_response


class ThreadViewSet(viewsets.ViewSet):
    """
    Inbox and per-thread operations for the authenticated user.

    Provides:
    - inbox: GET /inbox/ - Threads with last message and unread count
    - messages: GET /threads/{listing_id}/{guest_id}/messages/ - History
    - send: POST /threads/{listing_id}/{guest_id}/messages/ - Send a message
    - read: PUT /threads/{listing_id}/{guest_id}/read/ - Mark thread read
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_inbox",
        summary="List conversation threads",
        responses={200: ThreadSerializer(many=True)},
        tags=["Chat"],
    )
    def inbox(self, request):
        threads = InboxService.inbox(request.user)
        return Response(ThreadSerializer(threads, many=True).data)

    @extend_schema(
        operation_id="get_thread_history",
        summary="Get thread history",
        description="All messages of the thread, oldest first.",
        responses={
            200: MessageSerializer(many=True),
            403: OpenApiResponse(description="Not a participant"),
            404: OpenApiResponse(description="Listing or guest not found"),
        },
        tags=["Chat"],
    )
    def messages(self, request, listing_id=None, guest_id=None):
        access = ConversationService.resolve_thread(request.user, listing_id, guest_id)
        if not access.success:
            return error_response(access)

        history = MessageService.history(*access.data.key)
        return Response(MessageSerializer(history, many=True).data)

    @extend_schema(
        operation_id="send_thread_message",
        summary="Send a message",
        request=MessageCreateSerializer,
        responses={
            201: MessageSerializer,
            400: OpenApiResponse(description="Empty or too long content"),
            403: OpenApiResponse(description="Not a participant"),
            404: OpenApiResponse(description="Listing or guest not found"),
        },
        tags=["Chat"],
    )
    def send(self, request, listing_id=None, guest_id=None):
        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ConversationService.send(
            sender=request.user,
            listing_id=listing_id,
            guest_id=guest_id,
            content=serializer.validated_data["content"],
            realtime=RealtimeChannel(),
        )
        if not result.success:
            return error_response(result)

        return Response(MessageSerializer(result.data).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="mark_thread_read",
        summary="Mark thread as read",
        description="Marks the other party's messages as read. Idempotent.",
        request=None,
        responses={200: MarkReadResponseSerializer},
        tags=["Chat"],
    )
    def read(self, request, listing_id=None, guest_id=None):
        access = ConversationService.resolve_thread(request.user, listing_id, guest_id)
        if not access.success:
            return error_response(access)

        result = MessageService.mark_read(*access.data.key, reader_id=request.user.id)
        return Response(MarkReadResponseSerializer({"marked_count": result.data}).data)
