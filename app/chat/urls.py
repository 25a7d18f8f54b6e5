"""
URL configuration for the chat API.

Routes:
    inbox/                                          - Inbox (GET)
    threads/<listing_id>/<guest_id>/messages/       - History (GET), send (POST)
    threads/<listing_id>/<guest_id>/read/           - Mark read (PUT)

The WebSocket endpoint is declared in chat/routing.py.
"""

from django.urls import path

from chat.views import ThreadViewSet

app_name = "chat"

urlpatterns = [
    path(
        "inbox/",
        ThreadViewSet.as_view({"get": "inbox"}),
        name="inbox",
    ),
    path(
        "threads/<int:listing_id>/<int:guest_id>/messages/",
        ThreadViewSet.as_view({"get": "messages", "post": "send"}),
        name="thread-messages",
    ),
    path(
        "threads/<int:listing_id>/<int:guest_id>/read/",
        ThreadViewSet.as_view({"put": "read"}),
        name="thread-read",
    ),
]
