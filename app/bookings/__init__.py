"""
Bookings app: the reservation ledger.

This app handles:
- Creating confirmed bookings without overlapping dates
- Cancellation by the guest or the listing's host
- Taken-date lookups for calendars
- Booking confirmation and cancellation emails

Related apps:
    - listings: The listing row is the lock that serializes bookings
    - notifications: Guest and host are notified on every change

Usage:
    from bookings.services import BookingService

    result = BookingService.create(
        listing_id=listing.id,
        guest=user,
        check_in=date(2024, 6, 1),
        check_out=date(2024, 6, 5),
        total_price=Decimal("480.00"),
    )
    if not result.success:
        print(result.error_code)   # e.g. DATES_UNAVAILABLE
"""
