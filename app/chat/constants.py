"""
Constants for the chat module.

Covers message limits, the WebSocket event vocabulary and close codes.

Import example:
    from chat.constants import MESSAGE_CONFIG, ClientEvent, ServerEvent
"""

from typing import Final


# =============================================================================
# Message Configuration
# =============================================================================


class MESSAGE_CONFIG:
    """Configuration for message operations."""

    MAX_CONTENT_LENGTH: Final[int] = 5000  # Characters, after trimming

    # Preview length used in notification text
    PREVIEW_LENGTH: Final[int] = 80


# =============================================================================
# WebSocket Protocol
# =============================================================================


class ClientEvent:
    """Frame types a client may send (``{"type": ...}``)."""

    IDENTIFY: Final[str] = "identify"
    JOIN_ROOM: Final[str] = "join_room"
    LEAVE_ROOM: Final[str] = "leave_room"
    SEND_MESSAGE: Final[str] = "send_message"
    TYPING: Final[str] = "typing"
    STOP_TYPING: Final[str] = "stop_typing"


class ServerEvent:
    """Frame types the server pushes."""

    IDENTIFIED: Final[str] = "identified"
    JOINED: Final[str] = "joined"
    HISTORY: Final[str] = "history"
    MESSAGE_RECEIVED: Final[str] = "message_received"
    ALERT: Final[str] = "alert"
    TYPING: Final[str] = "typing"
    STOP_TYPING: Final[str] = "stop_typing"
    NOTIFICATION: Final[str] = "notification"
    ERROR: Final[str] = "error"


class CloseCode:
    """Application WebSocket close codes (4000-4999)."""

    UNAUTHENTICATED: Final[int] = 4001
