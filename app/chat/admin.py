"""
Django admin configuration for chat models.

Messages are read-only in the admin apart from the read flag; threads are
derived and have no admin page of their own.
"""

from django.contrib import admin

from chat.models import Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Admin interface for Message model."""

    list_display = [
        "id",
        "listing",
        "guest",
        "sender",
        "content_preview",
        "is_read",
        "created_at",
    ]
    list_filter = ["is_read", "created_at"]
    search_fields = ["content", "sender__email", "guest__email", "listing__title"]
    readonly_fields = ["listing", "guest", "sender", "content", "created_at", "updated_at"]
    raw_id_fields = ["listing", "guest", "sender"]
    ordering = ["-created_at"]

    @admin.display(description="Content Preview")
    def content_preview(self, obj: Message) -> str:
        max_length = 50
        if len(obj.content) > max_length:
            return obj.content[:max_length] + "..."
        return obj.content
