"""
Prescription storage.

Services depend on the PrescriptionRepository / ConsensusChecker protocols;
the Django* classes are the ORM-backed implementations wired in production.
"""

from typing import List, Protocol, Tuple

from django.db import DatabaseError, transaction
from django.utils import timezone

from apps.core.exceptions import NotFoundError, PersistenceError
from apps.orders.models import Order
from apps.patients.models import Patient

from . import depletion
from .models import Prescription, RefillHistory


class PrescriptionRepository(Protocol):
    def create(self, **fields) -> Prescription: ...

    def get(self, prescription_id: int) -> Prescription: ...

    def list_by_patient(self, patient_id: int) -> List[Prescription]: ...

    def update(self, prescription_id: int, **fields) -> Prescription: ...

    def record_refill(self, prescription_id: int, new_start_date) -> Tuple[RefillHistory, int]:
        """
        Archive the current box cycle, start a new one on ``new_start_date``
        and fulfill the open orders of the finished cycle, all in one transaction.

        Returns the history row and the number of orders auto-fulfilled.
        """
        ...

    def list_refills(self, prescription_id: int) -> List[RefillHistory]: ...


class ConsensusChecker(Protocol):
    def has_consensus(self, patient_id: int) -> bool: ...


def _prescription_not_found(prescription_id):
    return NotFoundError(
        message="Prescription not found",
        detail=f"Prescription {prescription_id} does not exist.",
        code="PRESCRIPTION_NOT_FOUND",
    )


class DjangoPrescriptionRepository:
    """PrescriptionRepository backed by the Django ORM."""

    def create(self, **fields):
        try:
            return Prescription.objects.create(**fields)
        except DatabaseError as exc:
            raise PersistenceError("creating prescription") from exc

    def get(self, prescription_id):
        try:
            return Prescription.objects.select_related("patient").get(pk=prescription_id)
        except Prescription.DoesNotExist:
            raise _prescription_not_found(prescription_id)
        except DatabaseError as exc:
            raise PersistenceError(f"loading prescription {prescription_id}") from exc

    def list_by_patient(self, patient_id):
        try:
            return list(Prescription.objects.filter(patient_id=patient_id))
        except DatabaseError as exc:
            raise PersistenceError(f"listing prescriptions of patient {patient_id}") from exc

    def update(self, prescription_id, **fields):
        try:
            with transaction.atomic():
                try:
                    prescription = Prescription.objects.select_for_update().get(pk=prescription_id)
                except Prescription.DoesNotExist:
                    raise _prescription_not_found(prescription_id)
                for name, value in fields.items():
                    setattr(prescription, name, value)
                prescription.save()
                return prescription
        except DatabaseError as exc:
            raise PersistenceError(f"updating prescription {prescription_id}") from exc

    def record_refill(self, prescription_id, new_start_date):
        try:
            with transaction.atomic():
                try:
                    prescription = Prescription.objects.select_for_update().get(pk=prescription_id)
                except Prescription.DoesNotExist:
                    raise _prescription_not_found(prescription_id)

                history = RefillHistory.objects.create(
                    prescription=prescription,
                    box_start_date=prescription.box_start_date,
                    box_end_date=depletion.estimated_depletion_date(
                        prescription.units_per_box,
                        prescription.daily_consumption,
                        prescription.box_start_date,
                    ),
                )

                previous_start = prescription.box_start_date
                prescription.box_start_date = new_start_date
                prescription.save(update_fields=["box_start_date", "updated_at"])

                fulfilled = (
                    Order.objects.filter(
                        prescription_id=prescription_id,
                        cycle_start_date=previous_start,
                    )
                    .exclude(status=Order.STATUS_FULFILLED)
                    .update(status=Order.STATUS_FULFILLED, updated_at=timezone.now())
                )
                return history, fulfilled
        except DatabaseError as exc:
            raise PersistenceError(f"recording refill for prescription {prescription_id}") from exc

    def list_refills(self, prescription_id):
        try:
            return list(RefillHistory.objects.filter(prescription_id=prescription_id))
        except DatabaseError as exc:
            raise PersistenceError(f"listing refills of prescription {prescription_id}") from exc


class DjangoConsensusChecker:
    def has_consensus(self, patient_id):
        try:
            consensus = (
                Patient.objects.filter(pk=patient_id)
                .values_list("consensus", flat=True)
                .first()
            )
        except DatabaseError as exc:
            raise PersistenceError(f"checking consensus of patient {patient_id}") from exc

        if consensus is None:
            raise NotFoundError(
                message="Patient not found",
                detail=f"Patient {patient_id} does not exist.",
                code="PATIENT_NOT_FOUND",
            )
        return consensus
