"""
Listings app: the listing directory, reviews and wishlist.

Related apps:
    - bookings: Books listings; the listing row is the booking lock
    - chat: Conversations are keyed by (listing, guest)
    - notifications: Hosts are notified of new reviews
"""
