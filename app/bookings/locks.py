"""
Row locking for the booking ledger.

Booking creation and cancellation on one listing are serialized by a
``SELECT ... FOR UPDATE`` on the listing row. The lock lives as long as the
surrounding transaction, so the overlap check and the insert see the same
set of confirmed bookings. Different listings never contend.

Usage:
    from bookings.locks import lock_listing

    with transaction.atomic():
        listing = lock_listing(listing_id)
        ...  # check overlap, insert

Note:
    Must be called within a transaction. On backends without row locks
    (SQLite) Django ignores FOR UPDATE; SQLite serializes writers itself.
"""

from __future__ import annotations

from django.db import transaction

from core.exceptions import NotFoundError
from listings.models import Listing


def lock_listing(listing_id) -> Listing:
    """
    Lock a listing row for the rest of the current transaction.

    Returns:
        The locked Listing (host loaded)

    Raises:
        NotFoundError: LISTING_NOT_FOUND if the listing does not exist
    """
    if not transaction.get_connection().in_atomic_block:
        raise RuntimeError("lock_listing() must run inside transaction.atomic()")

    listing = (
        Listing.objects.select_for_update(of=("self",))
        .select_related("host")
        .filter(pk=listing_id)
        .first()
    )
    if listing is None:
        raise NotFoundError(
            f"Listing {listing_id} not found",
            error_code="LISTING_NOT_FOUND",
            details={"listing_id": listing_id},
        )
    return listing
