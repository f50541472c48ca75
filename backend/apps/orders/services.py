"""
Order lifecycle service.

Decides which prescriptions need a restocking order, creates them, and
moves orders through pending -> prepared -> fulfilled. Fulfilling an order
hands over a new box, so it rolls the prescription over to a new cycle
through the injected rollover collaborator.
"""

import structlog
from django.conf import settings
from prometheus_client import Counter

from apps.core.exceptions import InvalidTransitionError
from apps.prescriptions import depletion
from apps.prescriptions.services import get_prescription_service

from .models import Order, next_status
from .repositories import DjangoOrderRepository, DjangoPrescriptionLookahead

logger = structlog.get_logger(__name__)

DEFAULT_LOOKAHEAD_DAYS = 7

ORDERS_CREATED_TOTAL = Counter(
    "replenishment_orders_created_total",
    "Restocking orders created by the lookahead policy",
)
ORDER_TRANSITIONS_TOTAL = Counter(
    "replenishment_order_transitions_total",
    "Order status transitions",
    ["to_status"],
)


class OrderService:
    def __init__(self, orders, prescriptions, rollover):
        self.orders = orders
        self.prescriptions = prescriptions
        self.rollover = rollover

    def ensure_orders(self, pharmacy_id, as_of, lookahead_days=DEFAULT_LOOKAHEAD_DAYS):
        """
        Create a pending order for every prescription of the pharmacy whose
        current box has at most ``lookahead_days`` left (already depleted
        ones included) and no active order for the current cycle.

        Safe to call repeatedly: existing active orders are skipped.
        Returns the orders created by this call.
        """
        created = []

        for prescription in self.prescriptions.list_for_pharmacy(pharmacy_id):
            depletion_date = depletion.estimated_depletion_date(
                prescription.units_per_box,
                prescription.daily_consumption,
                prescription.box_start_date,
            )
            if depletion.days_remaining(depletion_date, as_of) > lookahead_days:
                continue

            if self.orders.has_active_order(prescription.id, prescription.box_start_date):
                continue

            order = self.orders.create(
                prescription_id=prescription.id,
                cycle_start_date=prescription.box_start_date,
                estimated_depletion_date=depletion_date,
            )
            if order is None:
                continue

            created.append(order)
            ORDERS_CREATED_TOTAL.inc()
            logger.info(
                "order_created",
                order_id=order.id,
                prescription_id=prescription.id,
                estimated_depletion_date=str(depletion_date),
            )

        logger.debug(
            "orders_ensured",
            pharmacy_id=pharmacy_id,
            as_of=str(as_of),
            lookahead_days=lookahead_days,
            created=len(created),
        )
        return created

    def list_dashboard(self, pharmacy_id):
        return self.orders.list_dashboard(pharmacy_id)

    def advance_status(self, order_id, as_of):
        """
        Move the order one step forward.

        Raises NotFoundError for an unknown id and InvalidTransitionError
        for a fulfilled order, without touching anything. The status write
        is conditional on the status read here, so of two concurrent
        advances from the same status only one wins and only the winner
        records the refill starting on ``as_of``.
        """
        order = self.orders.get(order_id)

        target = next_status(order.status)
        if target is None:
            raise InvalidTransitionError(
                detail=f"Order {order_id} is already {order.status}.",
            )

        previous = order.status
        self.orders.update_status(order_id, target, previous)
        order.status = target

        ORDER_TRANSITIONS_TOTAL.labels(to_status=target).inc()
        logger.info(
            "order_status_advanced",
            order_id=order_id,
            from_status=previous,
            to_status=target,
        )

        if target == Order.STATUS_FULFILLED:
            self.rollover.record_refill(order.prescription_id, as_of)

        return order


def get_order_service():
    return OrderService(
        DjangoOrderRepository(),
        DjangoPrescriptionLookahead(),
        get_prescription_service(),
    )


def get_lookahead_days():
    return getattr(settings, "REPLENISHMENT_LOOKAHEAD_DAYS", DEFAULT_LOOKAHEAD_DAYS)
