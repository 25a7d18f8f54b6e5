import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Listing",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("title", models.CharField(help_text="Listing title", max_length=200)),
                ("description", models.TextField(blank=True, default="", help_text="Short summary shown on cards")),
                ("full_description", models.TextField(blank=True, default="", help_text="Long-form description shown on the detail page")),
                ("location", models.CharField(help_text="Human-readable location (city, region)", max_length=200)),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("beach", "Beach"),
                            ("cabin", "Cabin"),
                            ("city", "City"),
                            ("countryside", "Countryside"),
                            ("mountain", "Mountain"),
                            ("other", "Other"),
                        ],
                        db_index=True,
                        default="other",
                        help_text="Browse category",
                        max_length=20,
                    ),
                ),
                (
                    "rate",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Nightly rate",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                (
                    "child_rate",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Nightly rate per child, when priced separately",
                        max_digits=10,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                (
                    "infant_rate",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Nightly rate per infant, when priced separately",
                        max_digits=10,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                ("max_guests", models.PositiveSmallIntegerField(default=1, help_text="Maximum number of guests")),
                ("bedrooms", models.PositiveSmallIntegerField(default=1, help_text="Number of bedrooms")),
                ("beds", models.PositiveSmallIntegerField(default=1, help_text="Number of beds")),
                ("amenities", models.JSONField(blank=True, default=list, help_text="Amenity labels (wifi, kitchen, ...)")),
                ("images", models.JSONField(blank=True, default=list, help_text="Image URLs; the first one is the cover")),
                (
                    "latitude",
                    models.FloatField(
                        blank=True,
                        help_text="Map latitude",
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(-90.0),
                            django.core.validators.MaxValueValidator(90.0),
                        ],
                    ),
                ),
                (
                    "longitude",
                    models.FloatField(
                        blank=True,
                        help_text="Map longitude",
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(-180.0),
                            django.core.validators.MaxValueValidator(180.0),
                        ],
                    ),
                ),
                (
                    "rating",
                    models.DecimalField(
                        decimal_places=1,
                        default=Decimal("4.5"),
                        help_text="Average review rating (cached)",
                        max_digits=2,
                    ),
                ),
                ("reviews_count", models.PositiveIntegerField(default=0, help_text="Number of reviews (cached)")),
                (
                    "host",
                    models.ForeignKey(
                        help_text="Host who owns this listing",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="listings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "saved_by",
                    models.ManyToManyField(
                        blank=True,
                        help_text="Users who saved this listing to their wishlist",
                        related_name="wishlist",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "listings_listing",
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["host", "-created_at"], name="listing_host_idx")],
            },
        ),
        migrations.CreateModel(
            name="Review",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                (
                    "rating",
                    models.PositiveSmallIntegerField(
                        default=5,
                        help_text="Star rating from 1 to 5",
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(5),
                        ],
                    ),
                ),
                ("comment", models.TextField(blank=True, default="", help_text="Review text")),
                (
                    "author",
                    models.ForeignKey(
                        help_text="User who wrote the review",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reviews",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "listing",
                    models.ForeignKey(
                        help_text="Listing being reviewed",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reviews",
                        to="listings.listing",
                    ),
                ),
            ],
            options={
                "db_table": "listings_review",
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("listing", "author"), name="unique_review_per_author"),
                ],
            },
        ),
    ]
