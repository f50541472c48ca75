"""
Unit tests for approaching-depletion notification generation.
"""

from datetime import date, timedelta
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from django.db import DatabaseError

from apps.notifications.models import Notification
from apps.notifications.services import NotificationService, approaching_prescription_ids
from apps.prescriptions import depletion

AS_OF = date(2026, 5, 4)


def snapshot(prescription_id, days_left):
    status = depletion.status_for(days_left)
    return SimpleNamespace(
        prescription_id=prescription_id,
        prescription_status=lambda as_of, _status=status: _status,
    )


@pytest.fixture
def repository():
    repo = MagicMock()
    repo.create.return_value = True
    return repo


@pytest.fixture
def service(repository):
    return NotificationService(repository)


class TestApproachingPrescriptionIds:
    def test_only_approaching_band(self):
        entries = [
            snapshot(1, 20),
            snapshot(2, 7),
            snapshot(3, 0),
            snapshot(4, -1),
            snapshot(5, 1),
        ]
        assert approaching_prescription_ids(entries, AS_OF) == [2, 5]

    def test_deduplicates_keeping_first_seen_order(self):
        entries = [snapshot(9, 3), snapshot(4, 2), snapshot(9, 3)]
        assert approaching_prescription_ids(entries, AS_OF) == [9, 4]

    def test_empty(self):
        assert approaching_prescription_ids([], AS_OF) == []


class TestGenerateApproaching:
    def test_creates_one_per_prescription(self, service, repository):
        created = service.generate_approaching(3, [10, 11])

        assert created == 2
        repository.create.assert_any_call(3, 10, Notification.TRANSITION_APPROACHING)
        repository.create.assert_any_call(3, 11, Notification.TRANSITION_APPROACHING)

    def test_duplicates_are_not_counted(self, service, repository):
        repository.create.side_effect = [False, True]

        assert service.generate_approaching(3, [10, 11]) == 1


class TestNotifyApproaching:
    def test_skips_repository_when_nothing_is_approaching(self, service, repository):
        assert service.notify_approaching(3, [snapshot(1, 30)], AS_OF) == 0
        repository.create.assert_not_called()

    def test_failure_is_swallowed(self, service, repository):
        repository.create.side_effect = DatabaseError("disk full")

        assert service.notify_approaching(3, [snapshot(1, 2)], AS_OF) == 0

    def test_uses_entry_status(self, service, repository):
        entries = [snapshot(1, 2), snapshot(2, 12)]

        assert service.notify_approaching(3, entries, AS_OF) == 1
        repository.create.assert_called_once_with(3, 1, Notification.TRANSITION_APPROACHING)


class TestInbox:
    def test_delegates_to_repository(self, service, repository):
        repository.mark_all_read.return_value = 4
        repository.count_unread.return_value = 2

        assert service.mark_all_read(3) == 4
        assert service.count_unread(3) == 2
        service.mark_read(8, 3)
        repository.mark_read.assert_called_once_with(8, 3)
