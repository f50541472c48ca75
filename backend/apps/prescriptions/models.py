"""
Prescription models.
"""

from django.db import models

from apps.patients.models import Patient

from . import depletion


class Prescription(models.Model):
    """
    A patient's recurring medication.

    One box of ``units_per_box`` units is consumed at ``daily_consumption``
    units per day starting on ``box_start_date``; a refill starts a new box
    cycle by moving ``box_start_date`` forward.
    """

    patient = models.ForeignKey(
        Patient,
        on_delete=models.PROTECT,
        related_name="prescriptions",
    )

    medication_name = models.CharField(max_length=200)

    units_per_box = models.PositiveIntegerField()

    daily_consumption = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        help_text="Units taken per day",
    )

    box_start_date = models.DateField(help_text="Day the current box was started")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "prescriptions"
        ordering = ["medication_name"]
        indexes = [
            models.Index(fields=["patient"]),
        ]

    def __str__(self):
        return f"{self.medication_name} ({self.patient})"

    @property
    def estimated_depletion_date(self):
        return depletion.estimated_depletion_date(
            self.units_per_box, self.daily_consumption, self.box_start_date
        )

    def days_remaining(self, as_of):
        return depletion.days_remaining(self.estimated_depletion_date, as_of)

    def status(self, as_of):
        return depletion.status_for(self.days_remaining(as_of))


class RefillHistory(models.Model):
    """A finished box cycle, archived when the prescription is refilled."""

    prescription = models.ForeignKey(
        Prescription,
        on_delete=models.CASCADE,
        related_name="refill_history",
    )

    box_start_date = models.DateField()
    box_end_date = models.DateField(help_text="Estimated depletion date of that box")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "refill_history"
        ordering = ["-box_start_date", "-id"]
        verbose_name_plural = "Refill histories"

    def __str__(self):
        return f"{self.prescription_id}: {self.box_start_date} -> {self.box_end_date}"
