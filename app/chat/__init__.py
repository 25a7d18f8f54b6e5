"""
Chat app for guest/host messaging.

This app handles:
- Message storage and thread history
- The inbox (threads with last message and unread count)
- WebSocket rooms, typing indicators and message alerts

Related apps:
    - listings: Every conversation is about one listing
    - notifications: The first message of a thread notifies the recipient

WebSocket Support:
    Uses Django Channels for real-time communication.
    See consumers.py for WebSocket handlers.
    See routing.py for WebSocket URL patterns.
    See realtime.py for room naming and broadcast.

Usage:
    from chat.services import ConversationService, InboxService

    result = ConversationService.send(
        sender=guest,
        listing_id=listing.id,
        guest_id=guest.id,
        content="Hello!",
    )

    threads = InboxService.inbox(host)
"""
