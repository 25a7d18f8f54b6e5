"""
WebSocket consumer for the chat application.

One socket per client at ws/chat/. The socket is not bound to a
conversation: the client identifies to join its private room, then joins
and leaves conversation rooms as it opens threads.

Authentication:
    JWTAuthMiddleware attaches the user to self.scope["user"].
    Anonymous connections are closed with code 4001.

Rooms:
    user_{user_id}                 private room (alert, notification)
    chat_{listing_id}-{guest_id}   conversation room (message_received,
                                   typing, stop_typing)

Message Types (from client):
    - identify: {"type": "identify", "user_id": 7}
    - join_room: {"type": "join_room", "listing_id": 3, "guest_id": 7}
    - leave_room: {"type": "leave_room", "listing_id": 3, "guest_id": 7}
    - send_message: {"type": "send_message", "listing_id": 3, "guest_id": 7,
                     "sender_id": 7, "content": "Hi"}
    - typing / stop_typing: {"type": "typing", "listing_id": 3, "guest_id": 7,
                             "sender_id": 7}

Message Types (to client):
    - identified, joined, history, message_received, alert, typing,
      stop_typing, notification
    - error: {"type": "error", "error": "...", "error_code": "..."}
"""

from __future__ import annotations

import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from chat.constants import ClientEvent, CloseCode, ServerEvent
from chat.realtime import RealtimeChannel, conversation_room, user_room
from chat.serializers import MessageSerializer
from chat.services import (
    ConversationService,
    MessageService,
    build_message_payload,
    parse_thread_key,
    recipient_id_for,
)
from core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class ChatConsumer(AsyncJsonWebsocketConsumer):
    """
    WebSocket consumer for realtime chat.

    Attributes:
        user: Authenticated user (from scope)
        realtime: RealtimeChannel around this consumer's channel layer
        rooms: Group names this connection has joined
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.user = None
        self.realtime: RealtimeChannel | None = None
        self.rooms: set[str] = set()

    async def connect(self):
        user = self.scope.get("user")

        if not user or not user.is_authenticated:
            logger.warning("Rejected unauthenticated chat connection")
            await self.close(code=CloseCode.UNAUTHENTICATED)
            return

        self.user = user
        self.realtime = RealtimeChannel(self.channel_layer)
        # Browsers drop the socket unless the offered subprotocol is echoed
        subprotocol = "jwt" if "jwt" in self.scope.get("subprotocols", []) else None
        await self.accept(subprotocol=subprotocol)
        logger.info(f"User {user.id} connected to chat")

    async def disconnect(self, close_code):
        if self.realtime is None:
            return

        for room in list(self.rooms):
            await self.realtime.leave(room, self.channel_name)
        self.rooms.clear()
        logger.info(f"User {self.user.id} disconnected from chat ({close_code})")

    async def receive_json(self, content, **kwargs):
        """
        Dispatch a client frame on its "type".

        Unknown types and malformed frames get an error frame; the socket
        stays open.
        """
        if not isinstance(content, dict):
            await self._send_error("Frames must be JSON objects", "VALIDATION_ERROR")
            return

        handlers = {
            ClientEvent.IDENTIFY: self._handle_identify,
            ClientEvent.JOIN_ROOM: self._handle_join_room,
            ClientEvent.LEAVE_ROOM: self._handle_leave_room,
            ClientEvent.SEND_MESSAGE: self._handle_send_message,
            ClientEvent.TYPING: self._handle_typing,
            ClientEvent.STOP_TYPING: self._handle_typing,
        }
        message_type = content.get("type")
        handler = handlers.get(message_type)

        if handler is None:
            await self._send_error(
                f"Unknown message type: {message_type}",
                "UNKNOWN_EVENT",
            )
            return

        await handler(content)

    # ------------------------------------------------------------------
    # Client events
    # ------------------------------------------------------------------

    async def _handle_identify(self, content):
        """Join the user's private room."""
        if not self._claims_own_identity(content.get("user_id")):
            await self._send_error(
                "user_id does not match the authenticated user",
                "PERMISSION_DENIED",
            )
            return

        await self._join(user_room(self.user.id))
        await self.send_json({"type": ServerEvent.IDENTIFIED, "user_id": self.user.id})

    async def _handle_join_room(self, content):
        """Authorize, join the conversation room and reply with its history."""
        result = await self._resolve_thread(content.get("listing_id"), content.get("guest_id"))
        if not result.success:
            await self._send_error(result.error, result.error_code)
            return

        listing_id, guest_id = result.data.key
        await self._join(conversation_room(listing_id, guest_id))
        await self.send_json(
            {
                "type": ServerEvent.JOINED,
                "listing_id": listing_id,
                "guest_id": guest_id,
            }
        )
        await self.send_json(
            {
                "type": ServerEvent.HISTORY,
                "listing_id": listing_id,
                "guest_id": guest_id,
                "messages": await self._history(listing_id, guest_id),
            }
        )

    async def _handle_leave_room(self, content):
        key = self._thread_key(content)
        if key is None:
            return

        room = conversation_room(*key)
        if room in self.rooms:
            await self.realtime.leave(room, self.channel_name)
            self.rooms.discard(room)

    async def _handle_send_message(self, content):
        """
        Persist a message and fan it out.

        The conversation room receives message_received, the other
        participant's private room receives alert.
        """
        if not self._claims_own_identity(content.get("sender_id")):
            await self._send_error(
                "sender_id does not match the authenticated user",
                "PERMISSION_DENIED",
            )
            return

        listing_id = content.get("listing_id")
        guest_id = content.get("guest_id")
        text = content.get("content")
        if not isinstance(text, str):
            text = ""

        result = await self._send_message(listing_id, guest_id, text)
        if not result["success"]:
            await self._send_error(result["error"], result["error_code"])
            return

        await self.realtime.deliver_message(
            result["payload"],
            result["listing_id"],
            result["guest_id"],
            result["recipient_id"],
        )

    async def _handle_typing(self, content):
        """
        Relay typing/stop_typing to the conversation room.

        Only rooms this connection has joined can be typed into, and the
        originating connection does not get its own event back. A frame
        naming another sender is rejected like send_message.
        """
        if not self._claims_own_identity(content.get("sender_id")):
            await self._send_error(
                "sender_id does not match the authenticated user",
                "PERMISSION_DENIED",
            )
            return

        key = self._thread_key(content)
        room = conversation_room(*key) if key else None
        if room not in self.rooms:
            await self._send_error("Join the conversation first", "ROOM_NOT_JOINED")
            return

        listing_id, guest_id = key
        await self.realtime.emit(
            room,
            content["type"],
            {
                "listing_id": listing_id,
                "guest_id": guest_id,
                "sender_id": self.user.id,
            },
            exclude_channel=self.channel_name,
        )

    # ------------------------------------------------------------------
    # Channel layer events
    # ------------------------------------------------------------------

    async def realtime_event(self, event):
        """
        Handle realtime.event messages from the channel layer.

        Writes {"type": <event>, **payload} to the socket unless this
        connection is the excluded one.
        """
        if event.get("exclude_channel") == self.channel_name:
            return

        await self.send_json({"type": event["event"], **event["payload"]})

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _claims_own_identity(self, claimed_id) -> bool:
        """A missing id is fine; a present one must be the socket's user."""
        if claimed_id in (None, ""):
            return True
        try:
            return int(claimed_id) == self.user.id
        except (TypeError, ValueError):
            return False

    @staticmethod
    def _thread_key(content) -> tuple[int, int] | None:
        """Normalized (listing_id, guest_id) of a frame, None when malformed."""
        try:
            return parse_thread_key(content.get("listing_id"), content.get("guest_id"))
        except ValidationError:
            return None

    async def _join(self, room: str) -> None:
        if room not in self.rooms:
            await self.realtime.join(room, self.channel_name)
            self.rooms.add(room)

    async def _send_error(self, error: str, error_code: str | None) -> None:
        await self.send_json(
            {
                "type": ServerEvent.ERROR,
                "error": error,
                "error_code": error_code,
            }
        )

    @database_sync_to_async
    def _resolve_thread(self, listing_id, guest_id):
        return ConversationService.resolve_thread(self.user, listing_id, guest_id)

    @database_sync_to_async
    def _history(self, listing_id, guest_id) -> list[dict]:
        messages = MessageService.history(listing_id, guest_id)
        return MessageSerializer(messages, many=True).data

    @database_sync_to_async
    def _send_message(self, listing_id, guest_id, text: str) -> dict:
        """
        Store the message via ConversationService.

        Returns dict with success status and either the delivery data or
        the error.
        """
        result = ConversationService.send(
            sender=self.user,
            listing_id=listing_id,
            guest_id=guest_id,
            content=text,
        )

        if not result.success:
            return {
                "success": False,
                "error": result.error,
                "error_code": result.error_code,
            }

        message = result.data
        return {
            "success": True,
            "payload": build_message_payload(message),
            "listing_id": message.listing_id,
            "guest_id": message.guest_id,
            "recipient_id": recipient_id_for(message),
        }
