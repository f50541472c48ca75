"""
Notification policy and inbox.

On every dashboard view the prescriptions currently in the approaching
band get a notification. Creation is idempotent on (pharmacy,
prescription, transition), so repeated views never duplicate them, and the
whole step is best-effort: a failure is logged, never raised into the
dashboard read path.
"""

import structlog
from prometheus_client import Counter

from apps.prescriptions import depletion

from .models import Notification
from .repositories import DjangoNotificationRepository

logger = structlog.get_logger(__name__)

NOTIFICATIONS_GENERATED_TOTAL = Counter(
    "notifications_generated_total",
    "Approaching-depletion notification attempts",
    ["result"],  # created, duplicate, error
)


def approaching_prescription_ids(entries, as_of):
    """
    Ids of prescriptions whose entry is exactly in the approaching band.

    Depleted ones are left out. Order of first appearance, no duplicates.
    """
    ids = []
    seen = set()
    for entry in entries:
        if entry.prescription_status(as_of) != depletion.STATUS_APPROACHING:
            continue
        if entry.prescription_id in seen:
            continue
        seen.add(entry.prescription_id)
        ids.append(entry.prescription_id)
    return ids


class NotificationService:
    def __init__(self, repository):
        self.repository = repository

    def generate_approaching(self, pharmacy_id, prescription_ids):
        """Create one approaching notification per id; returns how many were new."""
        created = 0
        for prescription_id in prescription_ids:
            if self.repository.create(
                pharmacy_id,
                prescription_id,
                Notification.TRANSITION_APPROACHING,
            ):
                created += 1
                NOTIFICATIONS_GENERATED_TOTAL.labels(result="created").inc()
            else:
                NOTIFICATIONS_GENERATED_TOTAL.labels(result="duplicate").inc()

        if created:
            logger.info(
                "approaching_notifications_created",
                pharmacy_id=pharmacy_id,
                created=created,
            )
        return created

    def notify_approaching(self, pharmacy_id, entries, as_of):
        """Best-effort generate_approaching over a dashboard snapshot."""
        prescription_ids = approaching_prescription_ids(entries, as_of)
        if not prescription_ids:
            return 0

        try:
            return self.generate_approaching(pharmacy_id, prescription_ids)
        except Exception as exc:
            NOTIFICATIONS_GENERATED_TOTAL.labels(result="error").inc()
            logger.error(
                "notification_generation_failed",
                pharmacy_id=pharmacy_id,
                prescription_count=len(prescription_ids),
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return 0

    def list(self, pharmacy_id):
        return self.repository.list_by_pharmacy(pharmacy_id)

    def mark_read(self, notification_id, pharmacy_id):
        self.repository.mark_read(notification_id, pharmacy_id)
        logger.info("notification_read", notification_id=notification_id, pharmacy_id=pharmacy_id)

    def mark_all_read(self, pharmacy_id):
        updated = self.repository.mark_all_read(pharmacy_id)
        logger.info("notifications_all_read", pharmacy_id=pharmacy_id, updated=updated)
        return updated

    def count_unread(self, pharmacy_id):
        return self.repository.count_unread(pharmacy_id)


def get_notification_service():
    return NotificationService(DjangoNotificationRepository())
