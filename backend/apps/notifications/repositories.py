"""
Notification storage.
"""

from typing import List, Protocol

from django.db import DatabaseError

from apps.core.exceptions import NotFoundError, PersistenceError

from .models import Notification


class NotificationRepository(Protocol):
    def create(self, pharmacy_id: int, prescription_id: int, transition_type: str) -> bool:
        """Create unless the natural key exists; True when a row was added."""
        ...

    def list_by_pharmacy(self, pharmacy_id: int) -> List[Notification]: ...

    def mark_read(self, notification_id: int, pharmacy_id: int) -> None: ...

    def mark_all_read(self, pharmacy_id: int) -> int: ...

    def count_unread(self, pharmacy_id: int) -> int: ...


class DjangoNotificationRepository:
    """NotificationRepository backed by the Django ORM."""

    def create(self, pharmacy_id, prescription_id, transition_type):
        try:
            _, created = Notification.objects.get_or_create(
                pharmacy_id=pharmacy_id,
                prescription_id=prescription_id,
                transition_type=transition_type,
            )
        except DatabaseError as exc:
            raise PersistenceError(
                f"creating {transition_type} notification for prescription {prescription_id}"
            ) from exc
        return created

    def list_by_pharmacy(self, pharmacy_id):
        try:
            return list(
                Notification.objects.filter(pharmacy_id=pharmacy_id)
                .select_related("prescription__patient")
            )
        except DatabaseError as exc:
            raise PersistenceError(f"listing notifications of pharmacy {pharmacy_id}") from exc

    def mark_read(self, notification_id, pharmacy_id):
        try:
            updated = Notification.objects.filter(
                pk=notification_id,
                pharmacy_id=pharmacy_id,
            ).update(read=True)
        except DatabaseError as exc:
            raise PersistenceError(f"marking notification {notification_id} read") from exc

        if not updated:
            raise NotFoundError(
                message="Notification not found",
                detail=f"Notification {notification_id} does not exist.",
                code="NOTIFICATION_NOT_FOUND",
            )

    def mark_all_read(self, pharmacy_id):
        try:
            return Notification.objects.filter(
                pharmacy_id=pharmacy_id,
                read=False,
            ).update(read=True)
        except DatabaseError as exc:
            raise PersistenceError(f"marking notifications of pharmacy {pharmacy_id} read") from exc

    def count_unread(self, pharmacy_id):
        try:
            return Notification.objects.filter(pharmacy_id=pharmacy_id, read=False).count()
        except DatabaseError as exc:
            raise PersistenceError(f"counting unread notifications of pharmacy {pharmacy_id}") from exc
