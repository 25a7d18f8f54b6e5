"""
Serializers for user identity.

Only the public shape lives here: other apps embed it wherever a
counterparty is shown (message senders, booking guests, listing hosts).
"""

from rest_framework import serializers

from authentication.models import User


class UserSummarySerializer(serializers.ModelSerializer):
    """Public identity of a user (no email)."""

    class Meta:
        model = User
        fields = ["id", "name", "avatar", "role"]
        read_only_fields = fields


class UserContactSerializer(serializers.ModelSerializer):
    """Identity plus email, shown to hosts for their guests' bookings."""

    class Meta:
        model = User
        fields = ["id", "name", "email", "avatar"]
        read_only_fields = fields
