"""Tests for DeliveryLogStore."""

from django.db import IntegrityError
from django.test import TestCase

from delivery.enums import Channel, ErrorKind
from delivery.models import DeliveryLogEntry
from delivery.schemas import ChannelContent, DeliveryLogFilters, DeliveryOutcome
from delivery.services.delivery_log_store import LOCK_STRIPES, DeliveryLogStore


class TestDeliveryLogStore(TestCase):
    """Test suite for DeliveryLogStore."""

    def setUp(self):
        """Set up test fixtures."""
        self.store = DeliveryLogStore()
        self.content = ChannelContent(
            channel=Channel.EMAIL,
            subject="Welcome Asha",
            text="Hello Asha",
            html="<p>Hello Asha</p>",
        )
        self.key = {
            "user_id": 7,
            "notification_type": "verification_approved",
            "channel": Channel.EMAIL,
            "recipient": "asha@example.com",
        }

    def test_first_record_inserts_row(self):
        """Test a new key creates a sent row."""
        entry = self.store.record(
            **self.key,
            outcome=DeliveryOutcome.sent("sendgrid", message_id="m-1"),
            content=self.content,
            template="Verification Approved",
        )

        self.assertEqual(entry.status, "sent")
        self.assertEqual(entry.attempt_count, 1)
        self.assertEqual(entry.subject, "Welcome Asha")
        self.assertEqual(entry.content, "Hello Asha")
        self.assertEqual(entry.template, "Verification Approved")
        self.assertEqual(entry.provider_message_id, "m-1")
        self.assertIsNotNone(entry.sent_at)
        self.assertIsNone(entry.skip_reason)

    def test_second_record_updates_same_row(self):
        """Test the same key keeps one row and the last status wins."""
        self.store.record(
            **self.key,
            outcome=DeliveryOutcome.sent("sendgrid"),
            content=self.content,
        )
        entry = self.store.record(
            **self.key,
            outcome=DeliveryOutcome.failed(ErrorKind.PROVIDER, "bounced"),
            content=self.content,
        )

        self.assertEqual(DeliveryLogEntry.objects.count(), 1)
        self.assertEqual(entry.status, "failed")
        self.assertEqual(entry.skip_reason, "bounced")
        self.assertEqual(entry.attempt_count, 2)
        self.assertIsNone(entry.sent_at)

    def test_different_recipients_get_separate_rows(self):
        """Test the recipient is part of the key."""
        outcome = DeliveryOutcome.sent("fcm")
        self.store.record(**{**self.key, "recipient": "token-1"}, outcome=outcome)
        self.store.record(**{**self.key, "recipient": "token-2"}, outcome=outcome)

        self.assertEqual(DeliveryLogEntry.objects.count(), 2)

    def test_get_returns_row_or_none(self):
        """Test get() finds the current row for a key."""
        self.assertIsNone(self.store.get(**self.key))

        self.store.record(**self.key, outcome=DeliveryOutcome.sent("sendgrid"))

        entry = self.store.get(**self.key)
        self.assertIsNotNone(entry)
        self.assertTrue(entry.is_sent)

    def test_insert_race_falls_back_to_update(self):
        """Test an IntegrityError on insert updates the existing row."""
        self.store.record(**self.key, outcome=DeliveryOutcome.sent("sendgrid"))

        calls = {"count": 0}
        original_upsert = self.store._upsert

        def racing_upsert(key, fields):
            calls["count"] += 1
            if calls["count"] == 1:
                raise IntegrityError("duplicate key")
            return original_upsert(key, fields)

        self.store._upsert = racing_upsert

        entry = self.store.record(
            **self.key,
            outcome=DeliveryOutcome.failed(ErrorKind.TRANSPORT, "timeout"),
        )

        self.assertEqual(calls["count"], 2)
        self.assertEqual(entry.status, "failed")
        self.assertEqual(DeliveryLogEntry.objects.count(), 1)


class TestDeliveryLogStoreLocks(TestCase):
    """Test suite for the in-process key locks."""

    def test_lock_pool_does_not_grow_with_keys(self):
        """Test many distinct recipients share a fixed set of locks."""
        store = DeliveryLogStore()

        locks = {
            id(store._lock_for((7, "verification_approved", "push", f"token-{i}")))
            for i in range(500)
        }

        self.assertLessEqual(len(locks), LOCK_STRIPES)
        self.assertEqual(len(store._locks), LOCK_STRIPES)

    def test_same_key_always_gets_same_lock(self):
        """Test writes for one key are serialized by one lock."""
        store = DeliveryLogStore(stripes=8)
        key = (7, "verification_approved", "email", "asha@example.com")

        self.assertIs(store._lock_for(key), store._lock_for(key))

    def test_recording_many_recipients_keeps_lock_pool_size(self):
        """Test record() does not add locks for new keys."""
        store = DeliveryLogStore(stripes=4)

        for i in range(20):
            store.record(
                user_id=7,
                notification_type="verification_approved",
                channel=Channel.PUSH,
                recipient=f"token-{i}",
                outcome=DeliveryOutcome.sent("fcm"),
            )

        self.assertEqual(len(store._locks), 4)
        self.assertEqual(DeliveryLogEntry.objects.count(), 20)

    def test_rejects_empty_pool(self):
        """Test at least one stripe is required."""
        with self.assertRaises(ValueError):
            DeliveryLogStore(stripes=0)


class TestDeliveryLogListing(TestCase):
    """Test suite for DeliveryLogStore.query and list_entries."""

    def setUp(self):
        """Write rows across types, channels and statuses, oldest first."""
        self.store = DeliveryLogStore()
        rows = [
            ("verification_approved", Channel.EMAIL, "a@example.com", True),
            ("verification_approved", Channel.PUSH, "token-1", False),
            ("site_rejected", Channel.EMAIL, "b@example.com", False),
            ("verification_approved", Channel.PUSH, "token-2", True),
            ("site_rejected", Channel.PUSH, "token-3", False),
        ]
        for notification_type, channel, recipient, sent in rows:
            outcome = (
                DeliveryOutcome.sent("provider")
                if sent
                else DeliveryOutcome.failed(ErrorKind.PROVIDER, "rejected")
            )
            self.store.record(
                user_id=7,
                notification_type=notification_type,
                channel=channel,
                recipient=recipient,
                outcome=outcome,
            )

    def test_query_orders_newest_first(self):
        """Test the most recently written row comes first."""
        recipients = list(self.store.query().values_list("recipient", flat=True))

        self.assertEqual(
            recipients,
            ["token-3", "token-2", "b@example.com", "token-1", "a@example.com"],
        )

    def test_filters_combine(self):
        """Test type, channel and status filters narrow the rows together."""
        filters = DeliveryLogFilters(
            notification_type="verification_approved",
            channel=Channel.PUSH,
            status="failed",
        )

        page = self.store.list_entries(filters)

        self.assertEqual(page.total, 1)
        self.assertEqual([e.recipient for e in page.entries], ["token-1"])
        self.assertEqual(page.entries[0].skip_reason, "rejected")

    def test_pages_with_exact_total(self):
        """Test page slicing keeps the total of all matching rows."""
        page = self.store.list_entries(page=2, page_size=2)

        self.assertEqual(page.total, 5)
        self.assertEqual(page.page, 2)
        self.assertEqual(
            [e.recipient for e in page.entries], ["b@example.com", "token-1"]
        )

    def test_page_past_end_is_empty(self):
        """Test a page beyond the last row has no entries."""
        page = self.store.list_entries(
            DeliveryLogFilters(status="sent"), page=3, page_size=2
        )

        self.assertEqual(page.total, 2)
        self.assertEqual(page.entries, [])

    def test_rejects_invalid_page(self):
        """Test page numbers start at 1."""
        with self.assertRaises(ValueError):
            self.store.list_entries(page=0)
