"""
Tests for chat app.

- test_services.py: Message store, inbox aggregation, thread access
- test_realtime.py: Room naming and layer broadcast
- test_middleware.py: JWT extraction for WebSocket handshakes
- test_consumers.py: ChatConsumer event protocol
- test_views.py: Inbox and thread REST endpoints

Usage:
    pytest chat/tests/test_consumers.py
"""
