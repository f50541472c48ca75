"""
Prescription service: validation, consent gate and box rollover.
"""

import structlog
from prometheus_client import Counter

from apps.core.exceptions import AppValidationError, ConsensusRequiredError

from .repositories import DjangoConsensusChecker, DjangoPrescriptionRepository

logger = structlog.get_logger(__name__)

REFILLS_RECORDED_TOTAL = Counter(
    "prescription_refills_recorded_total",
    "Prescription refills recorded (box cycle rollovers)",
)
ORDERS_AUTO_FULFILLED_TOTAL = Counter(
    "orders_auto_fulfilled_total",
    "Open orders fulfilled as a side effect of a refill",
)


def validate_prescription(medication_name, units_per_box, daily_consumption, box_start_date):
    """
    Check prescription fields, collecting every problem.

    Raises AppValidationError listing them all.
    """
    errors = []

    if not medication_name or not str(medication_name).strip():
        errors.append("Medication name is required.")
    if units_per_box is None or units_per_box <= 0:
        errors.append("Units per box must be greater than zero.")
    if daily_consumption is None or daily_consumption <= 0:
        errors.append("Daily consumption must be greater than zero.")
    if box_start_date is None:
        errors.append("Box start date is required.")

    # A box must last at least one day.
    if (
        units_per_box is not None and units_per_box > 0
        and daily_consumption is not None and daily_consumption > 0
        and daily_consumption >= units_per_box
    ):
        errors.append("Daily consumption must be lower than units per box.")

    if errors:
        raise AppValidationError(message="Invalid prescription", detail=errors)


class PrescriptionService:
    """Prescription use cases over an injected repository."""

    def __init__(self, repository, consensus):
        self.repository = repository
        self.consensus = consensus

    def create(self, patient_id, medication_name, units_per_box, daily_consumption, box_start_date):
        validate_prescription(medication_name, units_per_box, daily_consumption, box_start_date)

        if not self.consensus.has_consensus(patient_id):
            logger.info("prescription_refused_no_consensus", patient_id=patient_id)
            raise ConsensusRequiredError(
                detail=f"Patient {patient_id} has not given consent.",
            )

        prescription = self.repository.create(
            patient_id=patient_id,
            medication_name=medication_name.strip(),
            units_per_box=units_per_box,
            daily_consumption=daily_consumption,
            box_start_date=box_start_date,
        )
        logger.info(
            "prescription_created",
            prescription_id=prescription.id,
            patient_id=patient_id,
        )
        return prescription

    def get(self, prescription_id):
        return self.repository.get(prescription_id)

    def list_by_patient(self, patient_id):
        return self.repository.list_by_patient(patient_id)

    def update(self, prescription_id, medication_name, units_per_box, daily_consumption, box_start_date):
        validate_prescription(medication_name, units_per_box, daily_consumption, box_start_date)

        prescription = self.repository.update(
            prescription_id,
            medication_name=medication_name.strip(),
            units_per_box=units_per_box,
            daily_consumption=daily_consumption,
            box_start_date=box_start_date,
        )
        logger.info("prescription_updated", prescription_id=prescription_id)
        return prescription

    def record_refill(self, prescription_id, new_start_date):
        """
        Roll the prescription over to a new box starting on ``new_start_date``.

        The finished cycle is archived and any still-open order of that
        cycle is fulfilled, atomically.
        """
        history, fulfilled = self.repository.record_refill(prescription_id, new_start_date)

        REFILLS_RECORDED_TOTAL.inc()
        if fulfilled:
            ORDERS_AUTO_FULFILLED_TOTAL.inc(fulfilled)

        logger.info(
            "refill_recorded",
            prescription_id=prescription_id,
            previous_box_start=str(history.box_start_date),
            previous_box_end=str(history.box_end_date),
            new_box_start=str(new_start_date),
            orders_auto_fulfilled=fulfilled,
        )
        return history

    def list_refills(self, prescription_id):
        # 404 for unknown ids rather than an empty list
        self.repository.get(prescription_id)
        return self.repository.list_refills(prescription_id)


def get_prescription_service():
    return PrescriptionService(DjangoPrescriptionRepository(), DjangoConsensusChecker())
