"""
Test configuration and fixtures for listing tests.
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
def listing(db, host):
    return ListingFactory(host=host, title="Casa Azul")
