"""
URL configuration for the booking API.

Routes:
    /                           - Create (POST)
    {id}/cancel/                - Cancel (PUT)
    taken-dates/{listing_id}/   - Taken dates (GET, public)
    mine/                       - Guest's bookings (GET)
    hosting/                    - Host's bookings (GET)
"""

from rest_framework.routers import SimpleRouter

from bookings.views import BookingViewSet

app_name = "bookings"

router = SimpleRouter()
router.register(r"", BookingViewSet, basename="booking")

urlpatterns = router.urls
