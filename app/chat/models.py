"""
Chat models.

A conversation is not stored as a row of its own. It is identified by the
composite key (listing, guest): one guest talking to the host of one
listing. A host with several guests asking about the same listing
therefore has several independent conversations.

Models:
    Message: One chat message inside a (listing, guest) conversation

Design Decisions:
    - ``guest`` is always the guest party, including on messages the host
      sends, so both sides' messages land in the same thread
    - Messages are never edited or deleted; only ``is_read`` changes
    - Threads and unread counts are derived at query time
      (see chat.services.InboxService)
    - Listing and sender use SET_NULL so history survives their removal;
      threads whose listing or sender is gone are skipped by the inbox
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Q

from core.models import BaseModel


class Message(BaseModel):
    """
    A message within a (listing, guest) conversation.

    Fields:
        listing: Listing the conversation is about
        guest: Guest party of the conversation
        sender: Author (the guest or the listing's host)
        content: Trimmed, non-empty text
        is_read: Whether the counterparty has read it
        created_at: Send timestamp (from BaseModel)

    Ordering:
        (created_at, id) ascending, which is send order within a thread.
    """

    listing = models.ForeignKey(
        "listings.Listing",
        on_delete=models.SET_NULL,
        null=True,
        related_name="messages",
        help_text="Listing this conversation is about",
    )

    guest = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="guest_conversation_messages",
        help_text="Guest party of the conversation (also on host messages)",
    )

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="sent_messages",
        help_text="User who sent this message",
    )

    content = models.TextField(
        help_text="Message text (trimmed, never empty)",
    )

    is_read = models.BooleanField(
        default=False,
        help_text="Whether the recipient has read this message",
    )

    class Meta:
        db_table = "chat_message"
        ordering = ["created_at", "id"]
        indexes = [
            # History of one thread, in send order
            models.Index(
                fields=["listing", "guest", "created_at", "id"],
                name="chat_msg_thread_idx",
            ),
            # Inbox: messages the user sent
            models.Index(
                fields=["sender", "-created_at"],
                name="chat_msg_sender_idx",
            ),
            # Unread counts per thread
            models.Index(
                fields=["listing", "guest"],
                name="chat_msg_unread_idx",
                condition=Q(is_read=False),
            ),
        ]

    def __str__(self) -> str:
        preview = self.content[:50] + "..." if len(self.content) > 50 else self.content
        return f"User {self.sender_id} on {self.listing_id}-{self.guest_id}: {preview}"

    @property
    def thread_key(self) -> tuple:
        """Composite conversation key (listing_id, guest_id)."""
        return (self.listing_id, self.guest_id)
