"""
Root URL configuration.

URL Structure:
    /admin/                          - Django admin
    /health/                         - Health check (load balancers, Docker)
    /api/schema/                     - OpenAPI schema
    /api/docs/                       - ReDoc documentation
    /api/v1/listings/                - Listing directory, reviews, wishlist
    /api/v1/bookings/                - Booking ledger
    /api/v1/chat/                    - Inbox, thread history, mark-read
    /api/v1/notifications/           - Notification feed

The WebSocket route (``/ws/chat/``) lives in chat/routing.py and is mounted
by config/asgi.py.
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
api_v1_patterns = [
    path("listings/", include("listings.urls")),
    path("bookings/", include("bookings.urls")),
    path("chat/", include("chat.urls")),
    path("notifications/", include("notifications.urls")),
]

urlpatterns = [
    path("admin/", admin.site.urls),
    path("health/", health_check, name="health_check"),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("api/v1/", include(api_v1_patterns)),
]

admin.site.site_header = "Stayhub Admin"
admin.site.site_title = "Stayhub"
admin.site.index_title = "Marketplace administration"
