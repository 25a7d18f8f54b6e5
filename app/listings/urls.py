"""
URL configuration for the listing API.

Routes:
    reviews/{id}/       - Delete review (DELETE)
    /                   - Browse (GET), publish (POST)
    wishlist/           - Saved listings (GET)
    {id}/               - Detail (GET), update (PATCH), remove (DELETE)
    {id}/reviews/       - Reviews (GET, POST)
    {id}/wishlist/      - Toggle saved (POST)
"""

from rest_framework.routers import SimpleRouter

from listings.views import ListingViewSet, ReviewViewSet

app_name = "listings"

router = SimpleRouter()
router.register(r"reviews", ReviewViewSet, basename="review")
router.register(r"", ListingViewSet, basename="listing")

urlpatterns = router.urls
