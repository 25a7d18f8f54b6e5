"""
Tests for the User model.

Covers defaults, the display name fallback used by notifications and
e-mails, and the host role flag.
"""

import pytest
from django.db import IntegrityError

from authentication.models import User, UserRole
from authentication.tests.factories import HostFactory, UserFactory


class TestUserModel:
    def test_email_must_be_unique(self, db, user):
        """
        Why it matters: Email is the login identifier.
        """
        with pytest.raises(IntegrityError):
            User.objects.create_user(email=user.email, password="TestPass123!")

    def test_str_returns_email(self, user):
        assert str(user) == "guest@example.com"

    def test_get_full_name_returns_name_when_set(self, user):
        assert user.get_full_name() == "Gus"

    def test_get_full_name_falls_back_to_email(self, db):
        """
        Why it matters: Notification text interpolates the sender's name;
        users without one must still read sensibly.
        """
        user = UserFactory(name="")

        assert user.get_full_name() == user.email

    def test_is_host_reflects_role(self, db):
        assert HostFactory().is_host is True
        assert UserFactory().is_host is False

    def test_default_role_is_guest(self, db):
        user = User.objects.create_user(email="role@example.com")

        assert user.role == UserRole.GUEST

