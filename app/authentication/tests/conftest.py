"""
Test configuration and fixtures for authentication tests.

Usage:
    def test_example(user, host):
        assert host.is_host
"""

import pytest

from authentication.tests.factories import HostFactory, UserFactory


@pytest.fixture
def user(db):
    """Create a guest user."""
    return UserFactory(email="guest@example.com", name="Gus")


@pytest.fixture
def host(db):
    """Create a host user."""
    return HostFactory(email="host@example.com", name="Hana")


@pytest.fixture
def superuser(db):
    """Create a superuser."""
    from authentication.models import User

    return User.objects.create_superuser(email="admin@example.com", password="AdminPass123!")
