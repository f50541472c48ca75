"""
Pytest configuration and fixtures.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from apps.patients.models import Patient
from apps.pharmacies.models import Pharmacy
from apps.prescriptions.models import Prescription


@pytest.fixture
def api_client():
    """Return an API client for testing."""
    return APIClient()


@pytest.fixture
def today():
    return timezone.localdate()


@pytest.fixture
def pharmacy(db):
    return Pharmacy.objects.create(name="Farmacia Centrale", email="info@centrale.example")


@pytest.fixture
def other_pharmacy(db):
    return Pharmacy.objects.create(name="Farmacia del Porto")


@pytest.fixture
def patient(pharmacy, today):
    """A patient who consented to prescription tracking."""
    return Patient.objects.create(
        pharmacy=pharmacy,
        first_name="Jane",
        last_name="Doe",
        phone="555-0101",
        email="jane@example.com",
        delivery_address="Via Verdi 12",
        fulfillment=Patient.FULFILLMENT_SHIPPING,
        consensus=True,
        consensus_date=today - timedelta(days=30),
    )


@pytest.fixture
def patient_without_consensus(pharmacy):
    return Patient.objects.create(
        pharmacy=pharmacy,
        first_name="John",
        last_name="Smith",
        phone="555-0102",
    )


@pytest.fixture
def make_prescription(patient, today):
    """
    Build a prescription whose box has ``days_left`` days remaining today
    (1 unit per day, 30 units per box).
    """

    def _make(days_left, medication_name="Metformin 500 mg", owner=None):
        return Prescription.objects.create(
            patient=owner or patient,
            medication_name=medication_name,
            units_per_box=30,
            daily_consumption=Decimal("1"),
            box_start_date=today - timedelta(days=30 - days_left),
        )

    return _make


@pytest.fixture
def ok_prescription(make_prescription):
    return make_prescription(20, "Metformin 500 mg")


@pytest.fixture
def approaching_prescription(make_prescription):
    return make_prescription(5, "Atorvastatin 20 mg")


@pytest.fixture
def depleted_prescription(make_prescription):
    return make_prescription(-3, "Levothyroxine 50 mcg")
