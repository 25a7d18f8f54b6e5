"""
Test configuration and fixtures for notification tests.

Usage:
    def test_example(user, unread_notification, client_for):
        response = client_for(user).get("/api/v1/notifications/")
        assert response.status_code == 200
"""

import pytest

from authentication.tests.factories import UserFactory
from notifications.tests.factories import NotificationFactory


@pytest.fixture
def user(db):
    """User receiving notifications."""
    return UserFactory()


@pytest.fixture
def other_user(db):
    return UserFactory()


@pytest.fixture
def unread_notification(db, user):
    return NotificationFactory(recipient=user, is_read=False)


@pytest.fixture
def read_notification(db, user):
    return NotificationFactory(recipient=user, is_read=True)
