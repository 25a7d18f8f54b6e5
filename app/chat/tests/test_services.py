"""
Tests for the chat service layer.

- MessageService: Message store (save, history, mark read)
- InboxService: Thread aggregation (isolation, unread counts, ordering)
- ConversationService: Access checks, sending, initial alert

Testing Philosophy:
    Tests focus on observable behavior: ServiceResult states, error codes,
    rows written and side effects queued for commit.
"""

from unittest.mock import MagicMock, patch

import pytest
from freezegun import freeze_time

from chat.constants import MESSAGE_CONFIG
from chat.models import Message
from chat.services import ConversationService, InboxService, MessageService
from chat.tests.factories import MessageFactory
from listings.tests.factories import ListingFactory
from notifications.models import Notification, NotificationType


def send(sender, listing, guest, content):
    """Store a message directly, bypassing access checks."""
    result = MessageService.save_message(sender.id, listing.id, guest.id, content)
    assert result.success, result.error
    return result.data


# =============================================================================
# Message Store
# =============================================================================


class TestMessageServiceSaveMessage:
    def test_stores_trimmed_content(self, db, listing, guest):
        message = send(guest, listing, guest, "  Is it free in June?  ")

        assert message.content == "Is it free in June?"
        assert message.is_read is False
        assert message.thread_key == (listing.id, guest.id)

    @pytest.mark.parametrize("content", ["", "   ", "\n\t", None])
    def test_rejects_empty_content(self, db, listing, guest, content):
        """
        Why it matters: Blank bubbles in the thread are never useful and
        both HTTP and socket sends must reject them the same way.
        """
        result = MessageService.save_message(guest.id, listing.id, guest.id, content)

        assert not result.success
        assert result.error_code == "VALIDATION_ERROR"
        assert Message.objects.count() == 0

    def test_rejects_content_over_limit(self, db, listing, guest):
        content = "x" * (MESSAGE_CONFIG.MAX_CONTENT_LENGTH + 1)

        result = MessageService.save_message(guest.id, listing.id, guest.id, content)

        assert result.error_code == "VALIDATION_ERROR"

    def test_reply_marks_earlier_counterparty_messages_read(self, db, listing, guest, host):
        first = send(guest, listing, guest, "Hi")
        second = send(guest, listing, guest, "Anyone there?")

        send(host, listing, guest, "Hello")

        first.refresh_from_db()
        second.refresh_from_db()
        assert first.is_read and second.is_read

    def test_reply_does_not_touch_own_or_other_threads(
        self, db, listing, guest, other_guest, host
    ):
        own = send(host, listing, guest, "Welcome")
        elsewhere = send(other_guest, listing, other_guest, "Hi from Greta")

        send(host, listing, guest, "Check-in is at 3pm")

        own.refresh_from_db()
        elsewhere.refresh_from_db()
        assert own.is_read is False
        assert elsewhere.is_read is False


class TestMessageServiceHistory:
    def test_returns_thread_messages_in_send_order(self, db, listing, guest, host):
        send(guest, listing, guest, "one")
        send(host, listing, guest, "two")
        send(guest, listing, guest, "three")

        history = MessageService.history(listing.id, guest.id)

        assert [m.content for m in history] == ["one", "two", "three"]
        timestamps = [m.created_at for m in history]
        assert timestamps == sorted(timestamps)

    def test_ties_on_timestamp_keep_insert_order(self, db, listing, guest):
        with freeze_time("2024-05-30 10:00:00"):
            messages = [send(guest, listing, guest, str(i)) for i in range(3)]

        history = MessageService.history(listing.id, guest.id)

        assert [m.id for m in history] == [m.id for m in messages]

    def test_excludes_other_threads(self, db, listing, guest, other_guest):
        send(guest, listing, guest, "mine")
        send(other_guest, listing, other_guest, "not mine")

        history = MessageService.history(listing.id, guest.id)

        assert [m.content for m in history] == ["mine"]

    def test_empty_thread(self, db, listing, guest):
        assert MessageService.history(listing.id, guest.id) == []


class TestMessageServiceMarkRead:
    def test_flips_only_counterparty_messages(self, db, listing, guest, host):
        send(host, listing, guest, "Hello")
        send(host, listing, guest, "Any questions?")
        own = MessageFactory(listing=listing, guest=guest, sender=guest)

        result = MessageService.mark_read(listing.id, guest.id, reader_id=guest.id)

        assert result.data == 2
        own.refresh_from_db()
        assert own.is_read is False

    def test_is_idempotent(self, db, listing, guest, host):
        send(host, listing, guest, "Hello")

        first = MessageService.mark_read(listing.id, guest.id, reader_id=guest.id)
        second = MessageService.mark_read(listing.id, guest.id, reader_id=guest.id)

        assert first.data == 1
        assert second.data == 0


# =============================================================================
# Thread/Inbox Aggregator
# =============================================================================


class TestInboxService:
    def test_guest_host_scenario(self, db, listing, guest, host):
        """
        G sends "Hi", H replies "Hello".

        Why it matters: Each side sees the same single thread with the reply
        as last message; only the guest has something unread.
        """
        send(guest, listing, guest, "Hi")
        send(host, listing, guest, "Hello")

        host_inbox = InboxService.inbox(host)
        guest_inbox = InboxService.inbox(guest)

        assert len(host_inbox) == 1
        assert host_inbox[0].last_message.content == "Hello"
        assert host_inbox[0].unread_count == 0

        assert len(guest_inbox) == 1
        assert guest_inbox[0].key == (listing.id, guest.id)
        assert guest_inbox[0].unread_count == 1

        MessageService.mark_read(listing.id, guest.id, reader_id=guest.id)
        assert InboxService.inbox(guest)[0].unread_count == 0

    def test_threads_on_same_listing_are_isolated(self, db, listing, guest, other_guest, host):
        """
        Two guests asking about one listing are two threads for the host.

        Why it matters: Merging them would leak one guest's messages into
        another guest's conversation.
        """
        send(guest, listing, guest, "From Gus 1")
        send(guest, listing, guest, "From Gus 2")
        send(other_guest, listing, other_guest, "From Greta")

        threads = {thread.key: thread for thread in InboxService.inbox(host)}

        assert set(threads) == {(listing.id, guest.id), (listing.id, other_guest.id)}
        assert threads[(listing.id, guest.id)].last_message.content == "From Gus 2"
        assert threads[(listing.id, guest.id)].unread_count == 2
        assert threads[(listing.id, other_guest.id)].last_message.content == "From Greta"
        assert threads[(listing.id, other_guest.id)].unread_count == 1

    def test_unread_counts_follow_mark_read(self, db, listing, guest, host):
        for i in range(4):
            send(guest, listing, guest, f"msg {i}")
        MessageFactory(listing=listing, guest=guest, sender=host, content="From host")

        assert InboxService.inbox(host)[0].unread_count == 4

        MessageService.mark_read(listing.id, guest.id, reader_id=host.id)

        assert InboxService.inbox(host)[0].unread_count == 0
        # The guest's view (the host's message) is unaffected
        assert InboxService.inbox(guest)[0].unread_count == 1

    def test_orders_threads_by_latest_message(self, db, host, guest):
        older_listing = ListingFactory(host=host)
        newer_listing = ListingFactory(host=host)
        with freeze_time("2024-05-30 10:00:00") as frozen:
            send(guest, older_listing, guest, "first")
            frozen.tick()
            send(guest, newer_listing, guest, "second")
            frozen.tick()
            send(guest, older_listing, guest, "third")

        keys = [thread.key for thread in InboxService.inbox(guest)]

        assert keys == [(older_listing.id, guest.id), (newer_listing.id, guest.id)]

    def test_skips_threads_whose_listing_is_gone(self, db, host, guest):
        doomed = ListingFactory(host=host)
        send(guest, doomed, guest, "Hello?")
        doomed.delete()

        assert InboxService.inbox(guest) == []

    def test_excludes_unrelated_users(self, db, listing, guest, outsider):
        send(guest, listing, guest, "Hi")

        assert InboxService.inbox(outsider) == []


# =============================================================================
# Conversation access and delivery
# =============================================================================


class TestConversationServiceResolveThread:
    def test_guest_and_host_are_participants(self, db, listing, guest, host):
        assert ConversationService.resolve_thread(guest, listing.id, guest.id).success
        assert ConversationService.resolve_thread(host, listing.id, guest.id).success

    @pytest.mark.parametrize("pad", [lambda v: f"0{v}", lambda v: f" {v} ", str, float])
    def test_returns_normalized_key(self, db, listing, guest, pad):
        result = ConversationService.resolve_thread(guest, pad(listing.id), pad(guest.id))

        assert result.data.key == (listing.id, guest.id)
        assert result.data.listing == listing

    def test_outsider_is_rejected(self, db, listing, guest, outsider):
        result = ConversationService.resolve_thread(outsider, listing.id, guest.id)

        assert result.error_code == "NOT_PARTICIPANT"
        assert result.status_code == 403

    def test_unknown_listing(self, db, guest):
        result = ConversationService.resolve_thread(guest, 999999, guest.id)

        assert result.error_code == "LISTING_NOT_FOUND"

    def test_unknown_guest(self, db, listing, host):
        result = ConversationService.resolve_thread(host, listing.id, 999999)

        assert result.error_code == "GUEST_NOT_FOUND"

    def test_host_cannot_be_guest_of_own_listing(self, db, listing, host):
        result = ConversationService.resolve_thread(host, listing.id, host.id)

        assert result.error_code == "VALIDATION_ERROR"

    def test_malformed_ids(self, db, guest):
        result = ConversationService.resolve_thread(guest, "abc", None)

        assert result.error_code == "VALIDATION_ERROR"


class TestConversationServiceSend:
    def test_outsider_cannot_send(self, db, listing, guest, outsider):
        result = ConversationService.send(outsider, listing.id, guest.id, "Hi")

        assert result.error_code == "NOT_PARTICIPANT"
        assert Message.objects.count() == 0

    def test_first_message_notifies_recipient(self, db, listing, guest, host):
        """
        Why it matters: The first message is the only one that raises a
        notification; later ones surface through inbox unread counts.
        """
        ConversationService.send(guest, listing.id, guest.id, "Is June free?")
        ConversationService.send(guest, listing.id, guest.id, "For 4 nights")

        notifications = Notification.objects.filter(recipient=host)
        assert notifications.count() == 1
        notification = notifications.get()
        assert notification.notification_type == NotificationType.MESSAGE
        assert "Gus" in notification.message
        assert notification.link == f"/inbox?listing={listing.id}&guest={guest.id}"

    def test_host_opening_thread_notifies_guest(self, db, listing, guest, host):
        ConversationService.send(host, listing.id, guest.id, "Welcome!")

        assert Notification.objects.filter(recipient=guest).count() == 1
        assert Notification.objects.filter(recipient=host).count() == 0

    def test_delivers_after_commit(self, db, listing, guest, host, django_capture_on_commit_callbacks):
        realtime = MagicMock()

        with django_capture_on_commit_callbacks(execute=True):
            result = ConversationService.send(
                guest, listing.id, guest.id, "Hi", realtime=realtime
            )

        realtime.deliver_message_sync.assert_called_once()
        payload, listing_id, guest_id, recipient_id = realtime.deliver_message_sync.call_args.args
        assert payload["id"] == result.data.id
        assert payload["sender"]["name"] == "Gus"
        assert (listing_id, guest_id, recipient_id) == (listing.id, guest.id, host.id)

    def test_failed_send_delivers_nothing(self, db, listing, guest, django_capture_on_commit_callbacks):
        realtime = MagicMock()

        with django_capture_on_commit_callbacks(execute=True):
            result = ConversationService.send(guest, listing.id, guest.id, "  ", realtime=realtime)

        assert result.error_code == "VALIDATION_ERROR"
        realtime.deliver_message_sync.assert_not_called()
        assert Notification.objects.count() == 0

    def test_notification_failure_does_not_fail_send(self, db, listing, guest):
        with patch(
            "notifications.services.Notification.objects.create",
            side_effect=RuntimeError("boom"),
        ):
            result = ConversationService.send(guest, listing.id, guest.id, "Hi")

        assert result.success
        assert Message.objects.filter(pk=result.data.pk).exists()
