"""
Test configuration and fixtures for booking tests.
"""

from datetime import date

import pytest

from authentication.tests.factories import HostFactory, UserFactory
from listings.tests.factories import ListingFactory


@pytest.fixture
def host(db):
    return HostFactory(name="Hana")


@pytest.fixture
def guest(db):
    return UserFactory(name="Gus", email="gus@example.com")


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
def june():
    """The reference stay: 2024-06-01 to 2024-06-05 (four nights)."""
    return date(2024, 6, 1), date(2024, 6, 5)
