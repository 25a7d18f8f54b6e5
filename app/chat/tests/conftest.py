"""
Test configuration and fixtures for chat tests.

The standard cast:
    host      owns ``listing``
    guest     asks the host about ``listing``
    outsider  takes part in nothing

Usage:
    def test_example(listing, guest, client_for):
        url = f"/api/v1/chat/threads/{listing.id}/{guest.id}/messages/"
        response = client_for(guest).get(url)
        assert response.status_code == 200
"""

import pytest

from authentication.tests.factories import HostFactory, UserFactory
from listings.tests.factories import ListingFactory


@pytest.fixture
def host(db):
    return HostFactory(name="Hana")


@pytest.fixture
def guest(db):
    return UserFactory(name="Gus")


@pytest.fixture
def other_guest(db):
    return UserFactory(name="Greta")


@pytest.fixture
def outsider(db):
    return UserFactory(name="Olga")


@pytest.fixture
def listing(db, host):
    return ListingFactory(host=host, title="Casa Azul")


@pytest.fixture
def thread_url():
    """Build the messages URL of a (listing, guest) thread."""

    def _thread_url(listing_id, guest_id, suffix="messages"):
        return f"/api/v1/chat/threads/{listing_id}/{guest_id}/{suffix}/"

    return _thread_url
