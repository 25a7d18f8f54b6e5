"""
Notification service layer.

Services:
    NotificationService: Create notifications and manage read state

Design Principles:
    - Services are stateless (class methods)
    - notify() never raises: a broken notification pipeline must not fail a
      booking, a review or a chat send. Failures are logged and returned as
      ServiceResult.failure() for callers that care.
    - The insert runs in its own savepoint, so a failed insert leaves the
      caller's transaction usable.
    - The realtime "notification" ping is sent after commit and only to the
      recipient's private room.

Usage:
    from notifications.services import NotificationService

    result = NotificationService.notify(
        recipient_id=booking.listing.host_id,
        notification_type=NotificationType.BOOKING,
        title="New booking",
        message="Gus booked Casa Azul for 2024-06-01 to 2024-06-05",
        link="/hosting/bookings",
    )

    NotificationService.list_recent(user)        # newest first, capped
    NotificationService.mark_all_read(user)      # ServiceResult[int]
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings

from chat.constants import ServerEvent
from chat.realtime import RealtimeChannel
from core.services import BaseService, ServiceResult
from notifications.models import Notification, NotificationType
from notifications.serializers import NotificationSerializer

if TYPE_CHECKING:
    from authentication.models import User


class NotificationService(BaseService):
    """
    Service for notification operations.

    Methods:
        notify: Best-effort creation plus realtime ping
        list_recent: Most recent notifications for a user
        unread_count: Badge count
        mark_all_read: Bulk flip of is_read
    """

    @classmethod
    def notify(
        cls,
        recipient_id: int,
        notification_type: str,
        title: str,
        message: str = "",
        link: str = "",
        realtime: RealtimeChannel | None = None,
    ) -> ServiceResult[Notification]:
        """
        Create a notification for a user.

        Args:
            recipient_id: ID of the user receiving the notification
            notification_type: One of NotificationType
            title: Headline
            message: Body text
            link: Client route for the notification
            realtime: Channel used for the ping (defaults to a new one
                around the configured layer)

        Returns:
            ServiceResult with the Notification, or a NOTIFICATION_FAILED
            failure. Never raises.
        """
        if notification_type not in NotificationType.values:
            cls.get_logger().error(
                f"Unknown notification type {notification_type!r} for user {recipient_id}"
            )
            return ServiceResult.failure(
                f"Unknown notification type: {notification_type}",
                error_code="VALIDATION_ERROR",
            )

        try:
            with cls.atomic():
                notification = Notification.objects.create(
                    recipient_id=recipient_id,
                    notification_type=notification_type,
                    title=title[:200],
                    message=message,
                    link=link[:500],
                )
        except Exception:
            cls.get_logger().exception(
                f"Failed to create {notification_type} notification for user {recipient_id}"
            )
            return ServiceResult.failure(
                "Notification could not be created",
                error_code="NOTIFICATION_FAILED",
            )

        cls.get_logger().info(
            f"Created {notification_type} notification {notification.id} "
            f"for user {recipient_id}"
        )

        cls.on_commit(lambda: cls._push(notification, realtime))
        return ServiceResult.success(notification)

    @classmethod
    def _push(cls, notification: Notification, realtime: RealtimeChannel | None) -> None:
        """Ping the recipient's private room. Runs after commit; never raises."""
        try:
            channel = realtime or RealtimeChannel()
            channel.push_to_user_sync(
                notification.recipient_id,
                ServerEvent.NOTIFICATION,
                {"notification": dict(NotificationSerializer(notification).data)},
            )
        except Exception:
            cls.get_logger().warning(
                f"Realtime ping for notification {notification.id} failed",
                exc_info=True,
            )

    @classmethod
    def list_recent(cls, user: User, limit: int | None = None) -> list[Notification]:
        """
        Most recent notifications for a user, newest first.

        Args:
            user: Recipient
            limit: Maximum rows (defaults to NOTIFICATION_LIST_LIMIT)
        """
        limit = limit or settings.NOTIFICATION_LIST_LIMIT
        return list(
            Notification.objects.filter(recipient=user).order_by("-created_at", "-id")[
                :limit
            ]
        )

    @classmethod
    def unread_count(cls, user: User) -> int:
        return Notification.objects.filter(recipient=user, is_read=False).count()

    @classmethod
    def mark_all_read(cls, user: User) -> ServiceResult[int]:
        """
        Mark every unread notification of the user as read.

        One UPDATE; running it again flips nothing.

        Returns:
            ServiceResult with the number of notifications flipped
        """
        count = Notification.objects.filter(
            recipient=user,
            is_read=False,
        ).update(is_read=True)

        cls.get_logger().info(f"Marked {count} notifications as read for user {user.id}")
        return ServiceResult.success(count)
