"""
Depletion estimates for a prescription's current box.

Pure functions, no database access. Everything works at day granularity:
datetimes are truncated to their calendar date before comparing.
"""

import math
from datetime import date, datetime, timedelta

STATUS_OK = "ok"
STATUS_APPROACHING = "approaching"
STATUS_DEPLETED = "depleted"

STATUS_CHOICES = [STATUS_OK, STATUS_APPROACHING, STATUS_DEPLETED]

# Fixed policy, not configurable per pharmacy.
APPROACHING_THRESHOLD_DAYS = 7


def _as_date(value):
    if isinstance(value, datetime):
        return value.date()
    return value


def estimated_depletion_date(units_per_box, daily_consumption, box_start_date) -> date:
    """
    Date the box runs out: start + floor(units / daily consumption) days.

    100 units at 3/day last 33 days, not 33.33.
    """
    days = math.floor(units_per_box / daily_consumption)
    return _as_date(box_start_date) + timedelta(days=days)


def days_remaining(depletion_date, as_of) -> int:
    """Days from ``as_of`` to ``depletion_date``; negative once past it."""
    return (_as_date(depletion_date) - _as_date(as_of)).days


def status_for(remaining: int) -> str:
    if remaining <= 0:
        return STATUS_DEPLETED
    if remaining <= APPROACHING_THRESHOLD_DAYS:
        return STATUS_APPROACHING
    return STATUS_OK


def depletion_status(depletion_date, as_of) -> str:
    return status_for(days_remaining(depletion_date, as_of))
