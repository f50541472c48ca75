"""
Unit tests for the depletion estimator.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from apps.prescriptions import depletion


class TestEstimatedDepletionDate:
    def test_uses_floor_of_units_over_consumption(self):
        # 100 / 3 = 33.33 -> 33 days
        result = depletion.estimated_depletion_date(100, 3, date(2026, 1, 1))
        assert result == date(2026, 2, 3)

    def test_whole_number_of_days(self):
        result = depletion.estimated_depletion_date(30, 1, date(2026, 1, 1))
        assert result == date(2026, 1, 31)

    def test_fractional_consumption(self):
        # 30 / 0.5 = 60 days
        result = depletion.estimated_depletion_date(30, Decimal("0.5"), date(2026, 1, 1))
        assert result == date(2026, 3, 2)

    def test_decimal_consumption_is_floored(self):
        # 10 / 1.5 = 6.67 -> 6 days
        result = depletion.estimated_depletion_date(10, Decimal("1.5"), date(2026, 1, 1))
        assert result == date(2026, 1, 7)

    def test_datetime_start_is_truncated(self):
        result = depletion.estimated_depletion_date(30, 1, datetime(2026, 1, 1, 18, 45))
        assert result == date(2026, 1, 31)


class TestDaysRemaining:
    @pytest.mark.parametrize(
        "as_of, expected",
        [
            (date(2026, 1, 31), 0),
            (date(2026, 2, 1), -1),
            (date(2026, 1, 11), 20),
        ],
    )
    def test_sign_around_depletion_day(self, as_of, expected):
        assert depletion.days_remaining(date(2026, 1, 31), as_of) == expected

    def test_time_of_day_is_ignored(self):
        late = datetime(2026, 1, 30, 23, 59)
        early = datetime(2026, 1, 30, 0, 1)
        assert depletion.days_remaining(date(2026, 1, 31), late) == 1
        assert depletion.days_remaining(date(2026, 1, 31), early) == 1


class TestStatus:
    @pytest.mark.parametrize(
        "remaining, expected",
        [
            (8, depletion.STATUS_OK),
            (30, depletion.STATUS_OK),
            (7, depletion.STATUS_APPROACHING),
            (1, depletion.STATUS_APPROACHING),
            (0, depletion.STATUS_DEPLETED),
            (-6, depletion.STATUS_DEPLETED),
        ],
    )
    def test_boundaries(self, remaining, expected):
        assert depletion.status_for(remaining) == expected

    def test_depletion_status_combines_both(self):
        assert depletion.depletion_status(date(2026, 1, 31), date(2026, 1, 24)) == "approaching"
        assert depletion.depletion_status(date(2026, 1, 31), date(2026, 1, 23)) == "ok"
