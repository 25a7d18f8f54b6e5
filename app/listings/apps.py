"""
Django app configuration for listings.
"""

from django.apps import AppConfig


class ListingsConfig(AppConfig):
    """Listing directory, reviews and wishlists."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "listings"
    verbose_name = "Listings"
