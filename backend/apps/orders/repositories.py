"""
Order storage.

OrderService depends only on these protocols. The Django* classes are the
ORM-backed implementations; the conditional unique constraint on Order
makes "one active order per cycle" hold even under concurrent dashboard
loads.
"""

from typing import List, Optional, Protocol

from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from apps.core.exceptions import InvalidTransitionError, NotFoundError, PersistenceError
from apps.prescriptions.models import Prescription

from .dashboard import DashboardEntry
from .models import Order


class OrderRepository(Protocol):
    def create(self, prescription_id: int, cycle_start_date, estimated_depletion_date) -> Optional[Order]:
        """Create a pending order; None when an active one already exists."""
        ...

    def has_active_order(self, prescription_id: int, cycle_start_date) -> bool: ...

    def get(self, order_id: int) -> Order: ...

    def update_status(self, order_id: int, status: str, expected_status: str) -> None:
        """
        Set ``status`` only while the order is still in ``expected_status``;
        raises InvalidTransitionError when another request moved it first.
        """
        ...

    def list_dashboard(self, pharmacy_id: int) -> List[DashboardEntry]: ...


class PrescriptionLookahead(Protocol):
    def list_for_pharmacy(self, pharmacy_id: int) -> List[Prescription]:
        """Prescriptions of the pharmacy's consenting patients."""
        ...


class PrescriptionRollover(Protocol):
    def record_refill(self, prescription_id: int, new_start_date): ...


class DjangoOrderRepository:
    """OrderRepository backed by the Django ORM."""

    def create(self, prescription_id, cycle_start_date, estimated_depletion_date):
        try:
            with transaction.atomic():
                return Order.objects.create(
                    prescription_id=prescription_id,
                    cycle_start_date=cycle_start_date,
                    estimated_depletion_date=estimated_depletion_date,
                    status=Order.STATUS_PENDING,
                )
        except IntegrityError:
            # Another request created the active order first.
            return None
        except DatabaseError as exc:
            raise PersistenceError(f"creating order for prescription {prescription_id}") from exc

    def has_active_order(self, prescription_id, cycle_start_date):
        try:
            return (
                Order.objects.filter(
                    prescription_id=prescription_id,
                    cycle_start_date=cycle_start_date,
                )
                .exclude(status=Order.STATUS_FULFILLED)
                .exists()
            )
        except DatabaseError as exc:
            raise PersistenceError(
                f"checking active order for prescription {prescription_id}"
            ) from exc

    def get(self, order_id):
        try:
            return Order.objects.get(pk=order_id)
        except Order.DoesNotExist:
            raise NotFoundError(
                message="Order not found",
                detail=f"Order {order_id} does not exist.",
                code="ORDER_NOT_FOUND",
            )
        except DatabaseError as exc:
            raise PersistenceError(f"loading order {order_id}") from exc

    def update_status(self, order_id, status, expected_status):
        try:
            updated = Order.objects.filter(pk=order_id, status=expected_status).update(
                status=status,
                updated_at=timezone.now(),
            )
            exists = updated or Order.objects.filter(pk=order_id).exists()
        except DatabaseError as exc:
            raise PersistenceError(f"updating status of order {order_id}") from exc

        if updated:
            return
        if not exists:
            raise NotFoundError(
                message="Order not found",
                detail=f"Order {order_id} does not exist.",
                code="ORDER_NOT_FOUND",
            )
        # lost a concurrent advance
        raise InvalidTransitionError(
            detail=f"Order {order_id} is no longer {expected_status}.",
        )

    def list_dashboard(self, pharmacy_id):
        try:
            orders = (
                Order.objects.filter(prescription__patient__pharmacy_id=pharmacy_id)
                .select_related("prescription__patient")
                .order_by("estimated_depletion_date", "id")
            )
            return [DashboardEntry.from_order(order) for order in orders]
        except DatabaseError as exc:
            raise PersistenceError(f"listing dashboard of pharmacy {pharmacy_id}") from exc


class DjangoPrescriptionLookahead:
    def list_for_pharmacy(self, pharmacy_id):
        try:
            return list(
                Prescription.objects.filter(
                    patient__pharmacy_id=pharmacy_id,
                    patient__consensus=True,
                ).order_by("id")
            )
        except DatabaseError as exc:
            raise PersistenceError(
                f"listing prescriptions for lookahead of pharmacy {pharmacy_id}"
            ) from exc
