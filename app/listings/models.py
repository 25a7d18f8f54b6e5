"""
Listing directory models.

Models:
    Listing: A rentable property owned by a host
    Review: One guest's rating of a listing (at most one per author)

The chat and booking apps treat a listing as the authority on who the host
is; its title and images are what notifications and inbox threads show.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from core.models import BaseModel


class ListingCategory(models.TextChoices):
    """Browse category shown in the category bar."""

    BEACH = "beach", "Beach"
    CABIN = "cabin", "Cabin"
    CITY = "city", "City"
    COUNTRYSIDE = "countryside", "Countryside"
    MOUNTAIN = "mountain", "Mountain"
    OTHER = "other", "Other"


class Listing(BaseModel):
    """
    A property that guests can book and ask the host about.

    Fields:
        host: Owning user; receives guest messages and booking alerts
        title, description, full_description, location: Display data
        category: Browse category
        rate: Nightly price
        child_rate, infant_rate: Optional per-guest nightly prices
        max_guests, bedrooms, beds: Capacity
        amenities: List of amenity labels
        images: List of image URLs (first is the cover)
        latitude, longitude: Map position (both set or both empty)
        rating: Average review rating, cached (recalculated on review changes)
        reviews_count: Number of reviews, cached
        saved_by: Users that have this listing on their wishlist
    """

    host = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="listings",
        help_text="Host who owns this listing",
    )

    title = models.CharField(
        max_length=200,
        help_text="Listing title",
    )

    description = models.TextField(
        blank=True,
        default="",
        help_text="Short summary shown on cards",
    )

    full_description = models.TextField(
        blank=True,
        default="",
        help_text="Long-form description shown on the detail page",
    )

    location = models.CharField(
        max_length=200,
        help_text="Human-readable location (city, region)",
    )

    category = models.CharField(
        max_length=20,
        choices=ListingCategory.choices,
        default=ListingCategory.OTHER,
        db_index=True,
        help_text="Browse category",
    )

    rate = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
        help_text="Nightly rate",
    )

    child_rate = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0"))],
        help_text="Nightly rate per child, when priced separately",
    )

    infant_rate = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0"))],
        help_text="Nightly rate per infant, when priced separately",
    )

    max_guests = models.PositiveSmallIntegerField(
        default=1,
        help_text="Maximum number of guests",
    )

    bedrooms = models.PositiveSmallIntegerField(
        default=1,
        help_text="Number of bedrooms",
    )

    beds = models.PositiveSmallIntegerField(
        default=1,
        help_text="Number of beds",
    )

    amenities = models.JSONField(
        default=list,
        blank=True,
        help_text="Amenity labels (wifi, kitchen, ...)",
    )

    images = models.JSONField(
        default=list,
        blank=True,
        help_text="Image URLs; the first one is the cover",
    )

    latitude = models.FloatField(
        null=True,
        blank=True,
        validators=[MinValueValidator(-90.0), MaxValueValidator(90.0)],
        help_text="Map latitude",
    )

    longitude = models.FloatField(
        null=True,
        blank=True,
        validators=[MinValueValidator(-180.0), MaxValueValidator(180.0)],
        help_text="Map longitude",
    )

    rating = models.DecimalField(
        max_digits=2,
        decimal_places=1,
        default=Decimal("4.5"),
        help_text="Average review rating (cached)",
    )

    reviews_count = models.PositiveIntegerField(
        default=0,
        help_text="Number of reviews (cached)",
    )

    saved_by = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        blank=True,
        related_name="wishlist",
        help_text="Users who saved this listing to their wishlist",
    )

    class Meta:
        db_table = "listings_listing"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["host", "-created_at"], name="listing_host_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.location})"

    @property
    def coordinates(self) -> dict | None:
        """{"lat": ..., "lng": ...} for the map, or None when unplaced."""
        if self.latitude is None or self.longitude is None:
            return None
        return {"lat": self.latitude, "lng": self.longitude}

    @property
    def cover_image(self) -> str:
        """First image URL, or empty string."""
        return self.images[0] if self.images else ""


class Review(BaseModel):
    """
    A rating left on a listing.

    Each author keeps a single review per listing; posting again updates it.
    """

    listing = models.ForeignKey(
        Listing,
        on_delete=models.CASCADE,
        related_name="reviews",
        help_text="Listing being reviewed",
    )

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reviews",
        help_text="User who wrote the review",
    )

    rating = models.PositiveSmallIntegerField(
        default=5,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        help_text="Star rating from 1 to 5",
    )

    comment = models.TextField(
        blank=True,
        default="",
        help_text="Review text",
    )

    class Meta:
        db_table = "listings_review"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["listing", "author"],
                name="unique_review_per_author",
            ),
        ]

    def __str__(self) -> str:
        return f"Review {self.rating}/5 on {self.listing_id} by {self.author_id}"
