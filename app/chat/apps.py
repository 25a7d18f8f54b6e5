"""
Chat application configuration.

This app provides guest/host messaging with:
- Conversations keyed by (listing, guest)
- A derived inbox with per-thread unread counts
- Realtime delivery over Django Channels
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"
