import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("listings", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("check_in", models.DateField(help_text="Arrival date")),
                ("check_out", models.DateField(help_text="Departure date (exclusive)")),
                ("total_price", models.DecimalField(decimal_places=2, help_text="Total price for the stay", max_digits=10)),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("confirmed", "Confirmed"), ("cancelled", "Cancelled")],
                        db_index=True,
                        default="confirmed",
                        help_text="Booking status",
                        max_length=20,
                    ),
                ),
                (
                    "guest",
                    models.ForeignKey(
                        help_text="Guest who made the booking",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bookings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "listing",
                    models.ForeignKey(
                        help_text="Booked listing",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bookings",
                        to="listings.listing",
                    ),
                ),
            ],
            options={
                "db_table": "bookings_booking",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["listing", "status", "check_in"], name="booking_listing_dates_idx"),
                    models.Index(fields=["guest", "-created_at"], name="booking_guest_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("check_out__gt", models.F("check_in"))),
                        name="booking_checkout_after_checkin",
                    ),
                ],
            },
        ),
    ]
