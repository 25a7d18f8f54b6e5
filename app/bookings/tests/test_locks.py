"""
Tests for listing row locks.
"""

import pytest
from django.db import transaction

from bookings.locks import lock_listing
from core.exceptions import NotFoundError


class TestLockListing:
    @pytest.mark.django_db(transaction=True)
    def test_requires_transaction(self, listing):
        with pytest.raises(RuntimeError):
            lock_listing(listing.id)

    def test_returns_listing_with_host(self, listing, host, django_assert_num_queries):
        with transaction.atomic():
            locked = lock_listing(listing.id)

        with django_assert_num_queries(0):
            assert locked.host == host

    def test_unknown_listing(self, db):
        with transaction.atomic(), pytest.raises(NotFoundError) as exc_info:
            lock_listing(999999)

        assert exc_info.value.error_code == "LISTING_NOT_FOUND"
