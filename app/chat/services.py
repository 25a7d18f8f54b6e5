"""
Chat service layer.

Services:
    MessageService: The message store (save, history, mark read)
    InboxService: Thread/inbox aggregation for one user
    ConversationService: Access checks and sending with delivery side effects

Design Principles:
    - Services are stateless (class methods)
    - Expected failures return ServiceResult.failure(); error codes come from
      core.exceptions (VALIDATION_ERROR, LISTING_NOT_FOUND, NOT_PARTICIPANT, ...)
    - MessageService trusts its caller for identity and listing existence;
      ConversationService is the layer that checks them
    - Realtime delivery and notifications happen after commit and never fail
      the send

Usage:
    from chat.services import ConversationService, InboxService, MessageService

    result = ConversationService.send(
        sender=guest,
        listing_id=listing.id,
        guest_id=guest.id,
        content="Is the flat available in June?",
        realtime=RealtimeChannel(),
    )

    threads = InboxService.inbox(host)
    MessageService.mark_read(listing.id, guest.id, reader_id=host.id)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.contrib.auth import get_user_model
from django.db.models import Q

from chat.constants import MESSAGE_CONFIG
from chat.models import Message
from chat.serializers import MessageSerializer
from core.exceptions import (
    BaseApplicationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from core.services import BaseService, ServiceResult
from listings.models import Listing
from notifications.models import NotificationType
from notifications.services import NotificationService

if TYPE_CHECKING:
    from typing import Any

    from authentication.models import User
    from chat.realtime import RealtimeChannel


# =============================================================================
# Message Store
# =============================================================================


class MessageService(BaseService):
    """
    The message store.

    Methods:
        save_message: Persist a message in a (listing, guest) thread
        history: Messages of one thread in send order
        mark_read: Flip the counterparty's unread messages for a reader
    """

    @classmethod
    def save_message(
        cls,
        sender_id: int,
        listing_id: int,
        guest_id: int,
        content: str,
    ) -> ServiceResult[Message]:
        """
        Store a message.

        The content is trimmed; nothing else is checked here (sender and
        listing come from the caller's authenticated context).

        Writing in a thread means the sender has seen it: the other party's
        earlier unread messages are marked read for the sender.

        Returns:
            ServiceResult with the new Message

        Error codes:
            VALIDATION_ERROR: Content empty after trimming, or too long
        """
        content = content.strip() if content else ""
        if not content:
            return ServiceResult.failure(
                "Message content cannot be empty",
                error_code=ValidationError.default_error_code,
                errors={"content": ["This field may not be blank."]},
            )
        if len(content) > MESSAGE_CONFIG.MAX_CONTENT_LENGTH:
            return ServiceResult.failure(
                f"Message content exceeds {MESSAGE_CONFIG.MAX_CONTENT_LENGTH} characters",
                error_code=ValidationError.default_error_code,
                errors={"content": ["Message is too long."]},
            )

        message = Message.objects.create(
            sender_id=sender_id,
            listing_id=listing_id,
            guest_id=guest_id,
            content=content,
        )
        cls._mark_seen_by_sender(message)

        cls.get_logger().debug(
            f"User {sender_id} sent message {message.id} "
            f"in thread {listing_id}-{guest_id}"
        )
        return ServiceResult.success(message)

    @classmethod
    def _mark_seen_by_sender(cls, message: Message) -> int:
        return (
            Message.objects.filter(
                listing_id=message.listing_id,
                guest_id=message.guest_id,
                is_read=False,
                id__lt=message.id,
            )
            .exclude(sender_id=message.sender_id)
            .update(is_read=True)
        )

    @classmethod
    def history(cls, listing_id: int, guest_id: int) -> list[Message]:
        """
        All messages of a thread, oldest first.

        Ties on the timestamp are broken by id, which is insert order.
        """
        return list(
            Message.objects.filter(listing_id=listing_id, guest_id=guest_id)
            .select_related("sender")
            .order_by("created_at", "id")
        )

    @classmethod
    def mark_read(cls, listing_id: int, guest_id: int, reader_id: int) -> ServiceResult[int]:
        """
        Mark the thread's unread messages not sent by the reader as read.

        A single UPDATE limited to unread rows, so repeating it changes
        nothing.

        Returns:
            ServiceResult with the number of messages flipped
        """
        count = (
            Message.objects.filter(
                listing_id=listing_id,
                guest_id=guest_id,
                is_read=False,
            )
            .exclude(sender_id=reader_id)
            .update(is_read=True)
        )

        if count:
            cls.get_logger().debug(
                f"User {reader_id} read {count} messages in thread {listing_id}-{guest_id}"
            )
        return ServiceResult.success(count)


# =============================================================================
# Thread/Inbox Aggregator
# =============================================================================


@dataclass
class Thread:
    """
    One conversation as seen by one user (derived, never stored).

    Attributes:
        listing: Listing the conversation is about (host is listing.host)
        guest: Guest party
        last_message: Most recent message of the thread
        unread_count: Messages from the other party the viewer has not read
    """

    listing: Listing
    guest: Any
    last_message: Message
    unread_count: int = 0

    @property
    def key(self) -> tuple:
        return (self.listing.id, self.guest.id)


class InboxService(BaseService):
    """
    Derives a user's threads from the message store.

    Nothing is cached: every call recomputes from the raw messages.
    """

    @classmethod
    def inbox(cls, user: User) -> list[Thread]:
        """
        Threads the user takes part in, most recently active first.

        Algorithm:
            1. Gather messages where the user is the sender, the guest, or
               the host of the listing
            2. Scan them newest first; the first message seen for each
               (listing_id, guest_id) becomes that thread's last_message
            3. Count messages not sent by the user that are still unread
            4. Skip threads whose listing or last-message sender is gone
            5. Order by last_message (created_at, id) descending

        Threads are keyed by listing AND guest; one host may have several
        guests writing about the same listing and each stays separate.
        """
        messages = (
            Message.objects.filter(
                Q(sender=user) | Q(guest=user) | Q(listing__host=user)
            )
            .select_related("listing", "listing__host", "guest", "sender")
            .order_by("-created_at", "-id")
        )

        threads: dict[tuple, Thread] = {}
        for message in messages:
            key = message.thread_key
            thread = threads.get(key)
            if thread is None:
                thread = Thread(
                    listing=message.listing,
                    guest=message.guest,
                    last_message=message,
                )
                threads[key] = thread
            if message.sender_id != user.id and not message.is_read:
                thread.unread_count += 1

        resolvable = [
            thread
            for thread in threads.values()
            if thread.listing is not None and thread.last_message.sender is not None
        ]
        skipped = len(threads) - len(resolvable)
        if skipped:
            cls.get_logger().debug(
                f"Inbox for user {user.id}: skipped {skipped} unresolvable threads"
            )

        resolvable.sort(
            key=lambda thread: (thread.last_message.created_at, thread.last_message.id),
            reverse=True,
        )
        return resolvable


# =============================================================================
# Conversation access and delivery
# =============================================================================


def parse_thread_key(listing_id, guest_id) -> tuple[int, int]:
    """
    Normalize client-supplied thread ids to integers.

    ``"03"``, ``" 3"`` and ``3`` all name the same thread; room names and
    queries are built from the normalized pair only.

    Raises:
        ValidationError: Either id is missing or not an integer
    """
    try:
        return int(listing_id), int(guest_id)
    except (TypeError, ValueError):
        raise ValidationError(
            "listing_id and guest_id must be integers",
            details={"listing_id": [str(listing_id)], "guest_id": [str(guest_id)]},
        )


@dataclass
class ThreadAccess:
    """A thread the caller may read and write, with normalized ids."""

    listing: Listing
    guest_id: int

    @property
    def listing_id(self) -> int:
        return self.listing.id

    @property
    def key(self) -> tuple[int, int]:
        return (self.listing.id, self.guest_id)


def recipient_id_for(message: Message) -> int:
    """The participant who did not send the message."""
    host_id = message.listing.host_id
    return message.guest_id if message.sender_id == host_id else host_id


def build_message_payload(message: Message) -> dict:
    """JSON-ready message with the sender's public identity."""
    return dict(MessageSerializer(message).data)


class ConversationService(BaseService):
    """
    Thread-level operations for authenticated callers.

    Methods:
        resolve_thread: Check the thread exists and the user takes part in it
        send: Store a message, then deliver it and raise the initial alert
    """

    @classmethod
    def resolve_thread(cls, user: User, listing_id, guest_id) -> ServiceResult[ThreadAccess]:
        """
        Check that ``user`` may read and write the (listing_id, guest_id) thread.

        The user must be the guest of the thread or the listing's host.

        Returns:
            ServiceResult with a ThreadAccess carrying the Listing and the
            normalized guest id

        Error codes:
            VALIDATION_ERROR: Ids are malformed, or the host is named as guest
            LISTING_NOT_FOUND / GUEST_NOT_FOUND: Referenced record is absent
            NOT_PARTICIPANT: User is neither guest nor host of the thread
        """
        try:
            access = cls._resolve(user, listing_id, guest_id)
        except BaseApplicationError as exc:
            return cls.handle_exception(exc, f"Thread access for user {user.id}")
        return ServiceResult.success(access)

    @classmethod
    def _resolve(cls, user: User, listing_id, guest_id) -> ThreadAccess:
        listing_id, guest_id = parse_thread_key(listing_id, guest_id)

        listing = Listing.objects.select_related("host").filter(pk=listing_id).first()
        if listing is None:
            raise NotFoundError(
                f"Listing {listing_id} not found",
                error_code="LISTING_NOT_FOUND",
            )

        if user.id not in (guest_id, listing.host_id):
            raise PermissionDeniedError(
                "You are not a participant in this conversation",
                error_code="NOT_PARTICIPANT",
            )

        if guest_id == listing.host_id:
            raise ValidationError("A host cannot be the guest of their own listing")

        if not get_user_model().objects.filter(pk=guest_id).exists():
            raise NotFoundError(
                f"Guest {guest_id} not found",
                error_code="GUEST_NOT_FOUND",
            )

        return ThreadAccess(listing=listing, guest_id=guest_id)

    @classmethod
    def send(
        cls,
        sender: User,
        listing_id,
        guest_id,
        content: str,
        realtime: RealtimeChannel | None = None,
    ) -> ServiceResult[Message]:
        """
        Send a message on behalf of an authenticated user.

        Side effects after commit:
            - With ``realtime``: message_received to the conversation room
              and alert to the recipient's private room. Consumers pass None
              and deliver on their own channel.
            - First message of the thread: a MESSAGE notification for the
              recipient.

        Returns:
            ServiceResult with the stored Message (sender and listing loaded)
        """
        access = cls.resolve_thread(sender, listing_id, guest_id)
        if not access.success:
            return access
        listing = access.data.listing

        with cls.atomic():
            result = MessageService.save_message(
                sender_id=sender.id,
                listing_id=listing.id,
                guest_id=access.data.guest_id,
                content=content,
            )
            if not result.success:
                return result

            message = result.data
            message.listing = listing
            message.sender = sender
            is_first = not (
                Message.objects.filter(listing_id=listing.id, guest_id=message.guest_id)
                .exclude(pk=message.pk)
                .exists()
            )

            recipient_id = recipient_id_for(message)
            if is_first:
                cls._notify_first_message(message, recipient_id, realtime)

            if realtime is not None:
                payload = build_message_payload(message)
                cls.on_commit(
                    lambda: realtime.deliver_message_sync(
                        payload, listing.id, message.guest_id, recipient_id
                    )
                )

        cls.get_logger().info(
            f"User {sender.id} sent message {message.id} "
            f"in thread {listing.id}-{message.guest_id}"
        )
        return ServiceResult.success(message)

    @classmethod
    def _notify_first_message(
        cls,
        message: Message,
        recipient_id: int,
        realtime: RealtimeChannel | None,
    ) -> None:
        sender_name = message.sender.get_full_name()
        preview = message.content[: MESSAGE_CONFIG.PREVIEW_LENGTH]
        NotificationService.notify(
            recipient_id=recipient_id,
            notification_type=NotificationType.MESSAGE,
            title=f"New message about {message.listing.title}",
            message=f"{sender_name}: {preview}",
            link=f"/inbox?listing={message.listing_id}&guest={message.guest_id}",
            realtime=realtime,
        )
