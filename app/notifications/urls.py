"""
URL configuration for the notification API.

Routes:
    /                 - List recent notifications (GET)
    /unread-count/    - Unread count (GET)
    /read-all/        - Mark all as read (PUT)
"""

from rest_framework.routers import SimpleRouter

from notifications.views import NotificationViewSet

router = SimpleRouter()
router.register(r"", NotificationViewSet, basename="notification")

app_name = "notifications"
urlpatterns = router.urls
