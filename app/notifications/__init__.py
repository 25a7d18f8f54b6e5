"""
Notifications - the in-app alert feed.

Bookings, cancellations, reviews and new chat threads call
NotificationService.notify() for the affected user. Notifying is
best-effort: it never raises into the caller, and the realtime ping that
tells connected clients to refresh is sent only after commit.

Usage:
    from notifications.services import NotificationService
    from notifications.models import NotificationType

    NotificationService.notify(
        recipient=host,
        notification_type=NotificationType.BOOKING,
        title="New booking",
        message=f"{guest.name} booked {listing.title}",
        link="/hosting/bookings",
    )
"""
