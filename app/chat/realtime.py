"""
Realtime delivery over the Channels layer.

A RealtimeChannel wraps one channel layer and knows the two kinds of rooms:

    conversation room  chat_{listing_id}-{guest_id}
        Joined explicitly when a client opens a thread. Receives
        message_received, typing and stop_typing.

    private user room  user_{user_id}
        Joined when a client identifies. Receives alert and notification
        frames wherever the user currently is in the app.

Instances are created by their owner and handed to whoever needs to
broadcast: each ChatConsumer builds one around its own channel layer, and
HTTP views build one per request for the services they call. Nothing in
this module keeps a shared connection.

Every event travels through the layer as
``{"type": "realtime.event", "event": <name>, "payload": {...}}`` and is
written to the socket by ``ChatConsumer.realtime_event`` as
``{"type": <name>, **payload}``.

Delivery is at-most-once. A failing layer is logged and the event dropped;
clients recover by re-fetching inbox/history on reconnect.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from chat.constants import ServerEvent

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)

# Handler name on the consumer ("realtime.event" -> realtime_event)
LAYER_MESSAGE_TYPE = "realtime.event"


def conversation_room(listing_id, guest_id) -> str:
    """Group name for the thread keyed by (listing_id, guest_id)."""
    return f"chat_{listing_id}-{guest_id}"


def user_room(user_id) -> str:
    """Group name for a single user's private room."""
    return f"user_{user_id}"


class RealtimeChannel:
    """
    Room-addressed delivery over a channel layer.

    Args:
        layer: Channel layer to use. Defaults to the configured default
            layer; pass the consumer's ``self.channel_layer`` from a consumer.

    Usage:
        # In a consumer
        self.realtime = RealtimeChannel(self.channel_layer)
        await self.realtime.join(user_room(user.id), self.channel_name)

        # In a view
        ConversationService.send(..., realtime=RealtimeChannel())
    """

    def __init__(self, layer=None):
        self.layer = layer if layer is not None else get_channel_layer()

    @property
    def is_available(self) -> bool:
        return self.layer is not None

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    async def join(self, room: str, channel_name: str) -> None:
        await self.layer.group_add(room, channel_name)

    async def leave(self, room: str, channel_name: str) -> None:
        await self.layer.group_discard(room, channel_name)

    # ------------------------------------------------------------------
    # Broadcast
    # ------------------------------------------------------------------

    async def emit(
        self,
        room: str,
        event: str,
        payload: dict[str, Any],
        exclude_channel: str | None = None,
    ) -> bool:
        """
        Send an event to every connection in a room.

        Args:
            room: Group name
            event: Server event name (see chat.constants.ServerEvent)
            payload: JSON-serializable frame body
            exclude_channel: Channel name that must not receive the event

        Returns:
            True if handed to the layer, False if dropped
        """
        if not self.is_available:
            logger.warning(f"No channel layer configured; dropped {event} for {room}")
            return False

        try:
            await self.layer.group_send(
                room,
                {
                    "type": LAYER_MESSAGE_TYPE,
                    "event": event,
                    "payload": payload,
                    "exclude_channel": exclude_channel,
                },
            )
        except Exception:
            logger.warning(f"Realtime delivery of {event} to {room} failed", exc_info=True)
            return False
        return True

    async def deliver_message(
        self,
        message_payload: dict[str, Any],
        listing_id,
        guest_id,
        recipient_id,
    ) -> None:
        """
        Fan a freshly stored message out to its audience.

        The conversation room gets ``message_received``; the participant who
        did not send it gets ``alert`` in their private room.
        """
        await self.emit(
            conversation_room(listing_id, guest_id),
            ServerEvent.MESSAGE_RECEIVED,
            {"message": message_payload},
        )
        await self.emit(
            user_room(recipient_id),
            ServerEvent.ALERT,
            {"message": message_payload},
        )

    def deliver_message_sync(self, message_payload, listing_id, guest_id, recipient_id) -> None:
        """Synchronous deliver_message for views and on-commit hooks."""
        async_to_sync(self.deliver_message)(
            message_payload, listing_id, guest_id, recipient_id
        )

    def push_to_user_sync(self, user_id, event: str, payload: dict[str, Any]) -> bool:
        """Synchronous emit to one user's private room."""
        return async_to_sync(self.emit)(user_room(user_id), event, payload)
