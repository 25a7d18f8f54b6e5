"""
Listing service layer.

Services:
    ReviewService: One review per (listing, author), cached listing rating
    WishlistService: A user's saved listings

Design Principles:
    - Services are stateless (class methods)
    - Expected failures return ServiceResult.failure()
    - Cached aggregates (rating, reviews_count) are recalculated inside the
      same transaction as the review change
    - Host notifications go through NotificationService and never fail the
      review

Usage:
    from listings.services import ReviewService, WishlistService

    result = ReviewService.upsert_review(listing.id, guest, rating=4, comment="Lovely")
    saved = WishlistService.toggle(guest, listing.id).data   # True / False
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from django.conf import settings
from django.db.models import Avg, Count

from core.exceptions import (
    BaseApplicationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from core.services import BaseService, ServiceResult
from listings.models import Listing, Review
from notifications.models import NotificationType
from notifications.services import NotificationService

if TYPE_CHECKING:
    from authentication.models import User


def get_listing_or_raise(listing_id) -> Listing:
    listing = Listing.objects.select_related("host").filter(pk=listing_id).first()
    if listing is None:
        raise NotFoundError(
            f"Listing {listing_id} not found",
            error_code="LISTING_NOT_FOUND",
        )
    return listing


class ReviewService(BaseService):
    """
    Service for listing reviews.

    Methods:
        upsert_review: Create or update the author's review
        delete_review: Remove a review (author only)
        list_for_listing: Reviews of a listing, newest first
        recalculate_rating: Refresh the listing's cached aggregates
    """

    @classmethod
    def upsert_review(
        cls,
        listing_id,
        author: User,
        rating=None,
        comment: str | None = None,
    ) -> ServiceResult[Review]:
        """
        Create the author's review of a listing, or update it.

        A new review takes a rating of 5 and an empty comment when they are
        not given. An existing review only changes the fields passed as
        something other than None.

        Returns:
            ServiceResult with the Review

        Error codes:
            VALIDATION_ERROR: Rating is not an integer from 1 to 5
            LISTING_NOT_FOUND: Listing does not exist
        """
        try:
            if rating is not None:
                rating = cls._validate_rating(rating)
            with cls.atomic():
                listing = get_listing_or_raise(listing_id)
                review = (
                    Review.objects.select_for_update()
                    .filter(listing=listing, author=author)
                    .first()
                )
                created = review is None
                if created:
                    review = Review.objects.create(
                        listing=listing,
                        author=author,
                        rating=5 if rating is None else rating,
                        comment=comment or "",
                    )
                else:
                    cls._apply_changes(review, rating, comment)
                cls.recalculate_rating(listing)

                if listing.host_id != author.id:
                    NotificationService.notify(
                        recipient_id=listing.host_id,
                        notification_type=NotificationType.REVIEW,
                        title=f"New review on {listing.title}",
                        message=f"{author.get_full_name()} rated your stay {review.rating}/5",
                        link=f"/listings/{listing.id}",
                    )
        except BaseApplicationError as exc:
            return cls.handle_exception(exc, f"Review by user {author.id}")

        action = "created" if created else "updated"
        cls.get_logger().info(
            f"User {author.id} {action} review {review.id} on listing {listing.id}"
        )
        return ServiceResult.success(review)

    @staticmethod
    def _apply_changes(review: Review, rating, comment) -> None:
        changed = []
        if rating is not None:
            review.rating = rating
            changed.append("rating")
        if comment is not None:
            review.comment = comment
            changed.append("comment")
        if changed:
            review.save(update_fields=[*changed, "updated_at"])

    @classmethod
    def delete_review(cls, review_id, actor: User) -> ServiceResult[None]:
        """
        Delete a review. Only its author may do so.

        Error codes:
            REVIEW_NOT_FOUND: Review does not exist
            PERMISSION_DENIED: Actor is not the author
        """
        try:
            with cls.atomic():
                review = Review.objects.select_related("listing").filter(pk=review_id).first()
                if review is None:
                    raise NotFoundError(
                        f"Review {review_id} not found",
                        error_code="REVIEW_NOT_FOUND",
                    )
                if review.author_id != actor.id:
                    raise PermissionDeniedError("Only the author can delete this review")

                listing = review.listing
                review.delete()
                cls.recalculate_rating(listing)
        except BaseApplicationError as exc:
            return cls.handle_exception(exc, f"Review deletion by user {actor.id}")

        cls.get_logger().info(f"User {actor.id} deleted review {review_id}")
        return ServiceResult.success(None)

    @classmethod
    def list_for_listing(cls, listing_id) -> list[Review]:
        return list(
            Review.objects.filter(listing_id=listing_id)
            .select_related("author")
            .order_by("-created_at", "-id")
        )

    @classmethod
    def recalculate_rating(cls, listing: Listing) -> Listing:
        """
        Store the average rating (one decimal) and the review count.

        A listing without reviews falls back to LISTING_DEFAULT_RATING.
        """
        stats = Review.objects.filter(listing=listing).aggregate(
            average=Avg("rating"),
            total=Count("id"),
        )

        if stats["total"]:
            rating = Decimal(str(stats["average"])).quantize(
                Decimal("0.1"), rounding=ROUND_HALF_UP
            )
        else:
            rating = Decimal(str(settings.LISTING_DEFAULT_RATING))

        listing.rating = rating
        listing.reviews_count = stats["total"]
        listing.save(update_fields=["rating", "reviews_count", "updated_at"])
        return listing

    @staticmethod
    def _validate_rating(rating) -> int:
        if isinstance(rating, bool) or not isinstance(rating, int):
            raise ValidationError(
                "Rating must be a whole number from 1 to 5",
                details={"rating": ["Must be an integer."]},
            )
        if not 1 <= rating <= 5:
            raise ValidationError(
                "Rating must be a whole number from 1 to 5",
                details={"rating": ["Must be between 1 and 5."]},
            )
        return rating


class WishlistService(BaseService):
    """Saved listings of a user."""

    @classmethod
    def toggle(cls, user: User, listing_id) -> ServiceResult[bool]:
        """
        Add the listing to the user's wishlist, or remove it if present.

        Returns:
            ServiceResult with the saved state after the call
        """
        try:
            listing = get_listing_or_raise(listing_id)
        except BaseApplicationError as exc:
            return cls.handle_exception(exc, f"Wishlist toggle by user {user.id}")

        if listing.saved_by.filter(pk=user.pk).exists():
            listing.saved_by.remove(user)
            saved = False
        else:
            listing.saved_by.add(user)
            saved = True

        cls.get_logger().info(
            f"User {user.id} {'saved' if saved else 'unsaved'} listing {listing.id}"
        )
        return ServiceResult.success(saved)

    @classmethod
    def saved_listings(cls, user: User) -> list[Listing]:
        return list(user.wishlist.select_related("host").order_by("-created_at"))
