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
            name="Message",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("content", models.TextField(help_text="Message text (trimmed, never empty)")),
                ("is_read", models.BooleanField(default=False, help_text="Whether the recipient has read this message")),
                (
                    "guest",
                    models.ForeignKey(
                        help_text="Guest party of the conversation (also on host messages)",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="guest_conversation_messages",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "listing",
                    models.ForeignKey(
                        help_text="Listing this conversation is about",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="messages",
                        to="listings.listing",
                    ),
                ),
                (
                    "sender",
                    models.ForeignKey(
                        help_text="User who sent this message",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="sent_messages",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_message",
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(fields=["listing", "guest", "created_at", "id"], name="chat_msg_thread_idx"),
                    models.Index(fields=["sender", "-created_at"], name="chat_msg_sender_idx"),
                    models.Index(
                        condition=models.Q(("is_read", False)),
                        fields=["listing", "guest"],
                        name="chat_msg_unread_idx",
                    ),
                ],
            },
        ),
    ]
