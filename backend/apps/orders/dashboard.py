"""
Order dashboard: joined entries, filters and assembly.

The dashboard view is also the trigger for order generation and
approaching-depletion notifications; there is no background scheduler.
"""

from dataclasses import asdict, dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

import structlog

from apps.core.exceptions import PersistenceError
from apps.prescriptions import depletion

from .models import Order

logger = structlog.get_logger(__name__)

FILTER_ALL = "all"
FILTER_DATE_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class DashboardEntry:
    """Read-only projection of an order with its prescription and patient."""

    order_id: int
    prescription_id: int
    cycle_start_date: date
    estimated_depletion_date: date
    order_status: str
    medication_name: str
    units_per_box: int
    daily_consumption: Decimal
    box_start_date: date
    patient_id: int
    first_name: str
    last_name: str
    fulfillment: str
    delivery_address: str
    phone: str
    email: str

    @classmethod
    def from_order(cls, order):
        prescription = order.prescription
        patient = prescription.patient
        return cls(
            order_id=order.id,
            prescription_id=prescription.id,
            cycle_start_date=order.cycle_start_date,
            estimated_depletion_date=order.estimated_depletion_date,
            order_status=order.status,
            medication_name=prescription.medication_name,
            units_per_box=prescription.units_per_box,
            daily_consumption=prescription.daily_consumption,
            box_start_date=prescription.box_start_date,
            patient_id=patient.id,
            first_name=patient.first_name,
            last_name=patient.last_name,
            fulfillment=patient.fulfillment,
            delivery_address=patient.delivery_address,
            phone=patient.phone,
            email=patient.email,
        )

    def days_remaining(self, as_of) -> int:
        return depletion.days_remaining(self.estimated_depletion_date, as_of)

    def prescription_status(self, as_of) -> str:
        return depletion.status_for(self.days_remaining(as_of))


@dataclass(frozen=True)
class DashboardFilters:
    """
    Caller-supplied filters, kept as raw strings.

    - prescription_status: "", "all" or an exact depletion status
    - order_status: "all" shows everything, "" hides fulfilled orders,
      anything else is an exact match
    - date_from / date_to: inclusive YYYY-MM-DD bounds on the depletion
      date; unparseable values mean no bound
    """

    prescription_status: str = ""
    order_status: str = ""
    date_from: str = ""
    date_to: str = ""

    @classmethod
    def from_query_params(cls, params):
        return cls(
            prescription_status=params.get("prescription_status", "").strip(),
            order_status=params.get("order_status", "").strip(),
            date_from=params.get("date_from", "").strip(),
            date_to=params.get("date_to", "").strip(),
        )

    def as_dict(self):
        return asdict(self)


def parse_filter_date(value) -> Optional[date]:
    if not value:
        return None
    try:
        return datetime.strptime(value, FILTER_DATE_FORMAT).date()
    except ValueError:
        return None


def _matches_order_status(entry, order_status):
    if order_status == FILTER_ALL:
        return True
    if not order_status:
        # default view: active work only
        return entry.order_status != Order.STATUS_FULFILLED
    return entry.order_status == order_status


def apply_dashboard_filters(entries, filters: DashboardFilters, as_of) -> List[DashboardEntry]:
    """Keep the entries matching every filter."""
    date_from = parse_filter_date(filters.date_from)
    date_to = parse_filter_date(filters.date_to)
    prescription_status = filters.prescription_status

    result = []
    for entry in entries:
        if prescription_status and prescription_status != FILTER_ALL:
            if entry.prescription_status(as_of) != prescription_status:
                continue

        if not _matches_order_status(entry, filters.order_status):
            continue

        depletion_day = entry.estimated_depletion_date
        if isinstance(depletion_day, datetime):
            depletion_day = depletion_day.date()
        if date_from is not None and depletion_day < date_from:
            continue
        if date_to is not None and depletion_day > date_to:
            continue

        result.append(entry)
    return result


def assemble_dashboard(pharmacy_id, as_of, filters, lookahead_days, order_service, notification_service):
    """
    Build the dashboard for one pharmacy.

    1. create missing orders for prescriptions inside the lookahead window
    2. read the joined entries
    3. notify prescriptions that entered the approaching band (best-effort)
    4. apply the filters
    """
    try:
        order_service.ensure_orders(pharmacy_id, as_of, lookahead_days)
    except PersistenceError as exc:
        # Existing orders are still worth showing.
        logger.error(
            "ensure_orders_failed",
            pharmacy_id=pharmacy_id,
            error=str(exc),
        )

    entries = order_service.list_dashboard(pharmacy_id)

    notification_service.notify_approaching(pharmacy_id, entries, as_of)

    filtered = apply_dashboard_filters(entries, filters, as_of)
    logger.debug(
        "dashboard_assembled",
        pharmacy_id=pharmacy_id,
        total=len(entries),
        shown=len(filtered),
    )
    return filtered
