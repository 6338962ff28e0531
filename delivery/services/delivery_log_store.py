"""Persistence of per-recipient delivery state.

Each (user_id, notification_type, channel, recipient) key owns one row.
Writes for a key are serialized in process by a lock and across processes
by the unique constraint plus a row lock inside the transaction. The
in-process locks come from a fixed pool, so keys share stripes instead of
each owning a lock for the life of the process.
"""

import threading

from django.db import IntegrityError, transaction
from django.db.models import F, QuerySet
from django.utils import timezone

import structlog

from delivery.enums import Channel, DeliveryStatus
from delivery.models import DeliveryLogEntry
from delivery.schemas import (
    ChannelContent,
    DeliveryLogDetail,
    DeliveryLogFilters,
    DeliveryLogPage,
    DeliveryOutcome,
)

logger = structlog.get_logger(__name__)

LogKey = tuple[int, str, str, str]

LOCK_STRIPES = 64
DEFAULT_LOG_PAGE_SIZE = 20


class DeliveryLogStore:
    """Keyed upsert of DeliveryLogEntry rows."""

    def __init__(self, stripes: int = LOCK_STRIPES) -> None:
        """Initialize the store with a fixed pool of key locks."""
        if stripes < 1:
            raise ValueError("stripes must be at least 1")
        self._locks = tuple(threading.Lock() for _ in range(stripes))

    def _lock_for(self, key: LogKey) -> threading.Lock:
        return self._locks[hash(key) % len(self._locks)]

    def record(
        self,
        user_id: int,
        notification_type: str,
        channel: Channel | str,
        recipient: str,
        outcome: DeliveryOutcome,
        content: ChannelContent | None = None,
        template: str | None = None,
    ) -> DeliveryLogEntry:
        """Insert or update the row for a delivery key.

        Args:
            user_id: User the notification was for
            notification_type: Template key
            channel: Delivery channel
            recipient: Email address or device token
            outcome: Final outcome of the dispatch
            content: Rendered content, if rendering got that far
            template: Template name, if resolved

        Returns:
            The saved DeliveryLogEntry
        """
        channel = Channel(channel).value
        key: LogKey = (user_id, notification_type, channel, recipient)
        fields = self._fields_for(outcome, content, template)

        with self._lock_for(key):
            try:
                entry = self._upsert(key, fields)
            except IntegrityError:
                # Another process inserted the row first; update theirs
                logger.info(
                    "delivery_log_insert_race",
                    user_id=user_id,
                    notification_type=notification_type,
                    channel=channel,
                )
                entry = self._upsert(key, fields)

        logger.info(
            "delivery_log_recorded",
            user_id=user_id,
            notification_type=notification_type,
            channel=channel,
            status=entry.status,
            attempt_count=entry.attempt_count,
        )
        return entry

    def get(
        self,
        user_id: int,
        notification_type: str,
        channel: Channel | str,
        recipient: str,
    ) -> DeliveryLogEntry | None:
        """Current row for a delivery key, or None."""
        return DeliveryLogEntry.objects.filter(
            user_id=user_id,
            notification_type=notification_type,
            channel=Channel(channel).value,
            recipient=recipient,
        ).first()

    def query(
        self, filters: DeliveryLogFilters | None = None
    ) -> QuerySet[DeliveryLogEntry]:
        """Rows matching the filters, newest first."""
        lookup = filters.as_lookup() if filters else {}
        return DeliveryLogEntry.objects.filter(**lookup).order_by("-created_at", "-id")

    def list_entries(
        self,
        filters: DeliveryLogFilters | None = None,
        page: int = 1,
        page_size: int = DEFAULT_LOG_PAGE_SIZE,
    ) -> DeliveryLogPage:
        """One page of the delivery log with the exact matching count.

        Args:
            filters: Optional notification_type, channel and status filters
            page: 1-based page number
            page_size: Rows per page

        Returns:
            DeliveryLogPage; a page past the end has no entries
        """
        if page < 1 or page_size < 1:
            raise ValueError("page and page_size must be at least 1")

        queryset = self.query(filters)
        offset = (page - 1) * page_size
        entries = [
            DeliveryLogDetail.model_validate(entry)
            for entry in queryset[offset : offset + page_size]
        ]
        return DeliveryLogPage(
            entries=entries,
            total=queryset.count(),
            page=page,
            page_size=page_size,
        )

    def _upsert(self, key: LogKey, fields: dict) -> DeliveryLogEntry:
        user_id, notification_type, channel, recipient = key
        with transaction.atomic():
            entry = (
                DeliveryLogEntry.objects.select_for_update()
                .filter(
                    user_id=user_id,
                    notification_type=notification_type,
                    channel=channel,
                    recipient=recipient,
                )
                .first()
            )

            if entry is None:
                return DeliveryLogEntry.objects.create(
                    user_id=user_id,
                    notification_type=notification_type,
                    channel=channel,
                    recipient=recipient,
                    attempt_count=1,
                    **fields,
                )

            for name, value in fields.items():
                setattr(entry, name, value)
            entry.attempt_count = F("attempt_count") + 1
            entry.save()
            entry.refresh_from_db(fields=["attempt_count"])
            return entry

    def _fields_for(
        self,
        outcome: DeliveryOutcome,
        content: ChannelContent | None,
        template: str | None,
    ) -> dict:
        sent = outcome.success
        return {
            "status": (
                DeliveryStatus.SENT.value if sent else DeliveryStatus.FAILED.value
            ),
            "subject": content.subject if content else None,
            "content": content.text if content else None,
            "template": template,
            "skip_reason": None if sent else outcome.error_message,
            "provider": outcome.provider,
            "provider_message_id": outcome.provider_message_id,
            "provider_response": outcome.provider_response,
            "sent_at": timezone.now() if sent else None,
        }


delivery_log_store = DeliveryLogStore()
