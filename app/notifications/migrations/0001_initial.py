import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                (
                    "notification_type",
                    models.CharField(
                        choices=[("booking", "Booking"), ("message", "Message"), ("review", "Review"), ("system", "System")],
                        default="system",
                        help_text="Kind of event that produced the notification",
                        max_length=10,
                    ),
                ),
                ("title", models.CharField(help_text="Notification headline", max_length=200)),
                ("message", models.TextField(blank=True, default="", help_text="Notification body")),
                ("link", models.CharField(blank=True, default="", help_text="Client route opened by the notification", max_length=500)),
                ("is_read", models.BooleanField(default=False, help_text="Whether the notification has been read")),
                (
                    "recipient",
                    models.ForeignKey(
                        help_text="User receiving this notification",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notifications",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "notifications_notification",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["recipient", "-created_at"], name="notif_recipient_recent_idx"),
                    models.Index(
                        condition=models.Q(("is_read", False)),
                        fields=["recipient"],
                        name="notif_recipient_unread_idx",
                    ),
                ],
            },
        ),
    ]
