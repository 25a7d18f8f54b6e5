"""
Notification models.

A Notification is a recipient-addressed alert produced as a side effect of
a booking, cancellation, review or the first message of a chat thread.
Rows are immutable apart from ``is_read`` and are kept indefinitely; the
feed only ever reads the most recent ones.

Related files:
    - services.py: NotificationService (notify, list_recent, mark_all_read)
    - views.py: Feed endpoints
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Q

from core.models import BaseModel


class NotificationType(models.TextChoices):
    """
    What kind of event produced the notification.

    BOOKING: Booking created or cancelled
    MESSAGE: First message of a chat thread
    REVIEW: Review posted on a hosted listing
    SYSTEM: Operational notices
    """

    BOOKING = "booking", "Booking"
    MESSAGE = "message", "Message"
    REVIEW = "review", "Review"
    SYSTEM = "system", "System"


class Notification(BaseModel):
    """
    An alert for a single user.

    Fields:
        recipient: User receiving the notification
        notification_type: Event kind (booking, message, review, system)
        title: Short headline
        message: Body text
        link: Client route to open when the notification is clicked
        is_read: Whether the recipient has seen it
    """

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
        help_text="User receiving this notification",
    )

    notification_type = models.CharField(
        max_length=10,
        choices=NotificationType.choices,
        default=NotificationType.SYSTEM,
        help_text="Kind of event that produced the notification",
    )

    title = models.CharField(
        max_length=200,
        help_text="Notification headline",
    )

    message = models.TextField(
        blank=True,
        default="",
        help_text="Notification body",
    )

    link = models.CharField(
        max_length=500,
        blank=True,
        default="",
        help_text="Client route opened by the notification",
    )

    is_read = models.BooleanField(
        default=False,
        help_text="Whether the notification has been read",
    )

    class Meta:
        db_table = "notifications_notification"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(
                fields=["recipient", "-created_at"],
                name="notif_recipient_recent_idx",
            ),
            models.Index(
                fields=["recipient"],
                name="notif_recipient_unread_idx",
                condition=Q(is_read=False),
            ),
        ]

    def __str__(self) -> str:
        status = "read" if self.is_read else "unread"
        return f"{self.notification_type}: {self.title} -> {self.recipient_id} [{status}]"
