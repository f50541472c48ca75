"""
Unit tests for dashboard filtering and assembly.
"""

from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from apps.core.exceptions import PersistenceError
from apps.orders.dashboard import (
    DashboardEntry,
    DashboardFilters,
    apply_dashboard_filters,
    assemble_dashboard,
    parse_filter_date,
)
from apps.orders.models import Order

AS_OF = date(2026, 3, 10)


def entry(order_id, days_left, order_status=Order.STATUS_PENDING, prescription_id=None):
    depletion_date = AS_OF + timedelta(days=days_left)
    return DashboardEntry(
        order_id=order_id,
        prescription_id=prescription_id or order_id,
        cycle_start_date=depletion_date - timedelta(days=30),
        estimated_depletion_date=depletion_date,
        order_status=order_status,
        medication_name="Metformin 850mg",
        units_per_box=30,
        daily_consumption=Decimal("1.000"),
        box_start_date=depletion_date - timedelta(days=30),
        patient_id=1,
        first_name="Ana",
        last_name="Ruiz",
        fulfillment="shipping",
        delivery_address="Calle Mayor 1",
        phone="",
        email="",
    )


@pytest.fixture
def entries():
    return [
        entry(1, days_left=20),
        entry(2, days_left=5),
        entry(3, days_left=-2, order_status=Order.STATUS_PREPARED),
        entry(4, days_left=3, order_status=Order.STATUS_FULFILLED),
    ]


def ids(result):
    return [e.order_id for e in result]


class TestParseFilterDate:
    def test_valid(self):
        assert parse_filter_date("2026-03-01") == date(2026, 3, 1)

    @pytest.mark.parametrize("value", ["", None, "01/03/2026", "2026-13-01", "soon"])
    def test_invalid_means_no_bound(self, value):
        assert parse_filter_date(value) is None


class TestDashboardEntry:
    def test_status_is_derived_from_as_of(self):
        e = entry(1, days_left=7)
        assert e.days_remaining(AS_OF) == 7
        assert e.prescription_status(AS_OF) == "approaching"
        assert e.prescription_status(AS_OF - timedelta(days=1)) == "ok"
        assert e.prescription_status(AS_OF + timedelta(days=7)) == "depleted"


class TestApplyDashboardFilters:
    def test_default_hides_fulfilled(self, entries):
        result = apply_dashboard_filters(entries, DashboardFilters(), AS_OF)
        assert ids(result) == [1, 2, 3]

    def test_all_order_status_shows_fulfilled(self, entries):
        result = apply_dashboard_filters(entries, DashboardFilters(order_status="all"), AS_OF)
        assert ids(result) == [1, 2, 3, 4]

    def test_exact_order_status(self, entries):
        result = apply_dashboard_filters(entries, DashboardFilters(order_status="prepared"), AS_OF)
        assert ids(result) == [3]

    def test_fulfilled_order_status(self, entries):
        result = apply_dashboard_filters(entries, DashboardFilters(order_status="fulfilled"), AS_OF)
        assert ids(result) == [4]

    @pytest.mark.parametrize(
        "prescription_status, expected",
        [
            ("ok", [1]),
            ("approaching", [2]),
            ("depleted", [3]),
            ("all", [1, 2, 3]),
            ("", [1, 2, 3]),
        ],
    )
    def test_prescription_status(self, entries, prescription_status, expected):
        filters = DashboardFilters(prescription_status=prescription_status)
        assert ids(apply_dashboard_filters(entries, filters, AS_OF)) == expected

    def test_date_bounds_are_inclusive(self, entries):
        filters = DashboardFilters(
            order_status="all",
            date_from=str(AS_OF + timedelta(days=3)),
            date_to=str(AS_OF + timedelta(days=5)),
        )
        assert ids(apply_dashboard_filters(entries, filters, AS_OF)) == [2, 4]

    def test_unparseable_dates_are_ignored(self, entries):
        filters = DashboardFilters(date_from="yesterday", date_to="31/12/2026")
        assert ids(apply_dashboard_filters(entries, filters, AS_OF)) == [1, 2, 3]

    def test_filters_combine(self, entries):
        filters = DashboardFilters(
            prescription_status="approaching",
            order_status="pending",
            date_to=str(AS_OF + timedelta(days=10)),
        )
        assert ids(apply_dashboard_filters(entries, filters, AS_OF)) == [2]

    def test_from_query_params_strips_values(self):
        filters = DashboardFilters.from_query_params(
            {"prescription_status": " ok ", "date_from": "2026-01-01"}
        )
        assert filters.prescription_status == "ok"
        assert filters.order_status == ""
        assert filters.as_dict() == {
            "prescription_status": "ok",
            "order_status": "",
            "date_from": "2026-01-01",
            "date_to": "",
        }


class TestAssembleDashboard:
    def _services(self, entries):
        order_service = MagicMock()
        order_service.list_dashboard.return_value = entries
        notification_service = MagicMock()
        return order_service, notification_service

    def test_runs_generation_then_notifies_on_all_entries(self, entries):
        order_service, notification_service = self._services(entries)

        result = assemble_dashboard(7, AS_OF, DashboardFilters(), 7, order_service, notification_service)

        order_service.ensure_orders.assert_called_once_with(7, AS_OF, 7)
        order_service.list_dashboard.assert_called_once_with(7)
        # notifications see the unfiltered snapshot
        notification_service.notify_approaching.assert_called_once_with(7, entries, AS_OF)
        assert ids(result) == [1, 2, 3]

    def test_generation_failure_still_returns_entries(self, entries):
        order_service, notification_service = self._services(entries)
        order_service.ensure_orders.side_effect = PersistenceError("creating order for prescription 2")

        result = assemble_dashboard(7, AS_OF, DashboardFilters(order_status="all"), 7, order_service, notification_service)

        assert ids(result) == [1, 2, 3, 4]
        notification_service.notify_approaching.assert_called_once()

    def test_read_failure_propagates(self, entries):
        order_service, notification_service = self._services(entries)
        order_service.list_dashboard.side_effect = PersistenceError("listing dashboard")

        with pytest.raises(PersistenceError):
            assemble_dashboard(7, AS_OF, DashboardFilters(), 7, order_service, notification_service)

        notification_service.notify_approaching.assert_not_called()
