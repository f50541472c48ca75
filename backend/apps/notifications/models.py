"""
Notification model.
"""

from django.db import models

from apps.pharmacies.models import Pharmacy
from apps.prescriptions.models import Prescription


class Notification(models.Model):
    """
    Tells pharmacy staff a prescription crossed into a new urgency band.

    Unique per (pharmacy, prescription, transition_type): generating the
    same notification twice is a no-op.
    """

    TRANSITION_APPROACHING = "approaching"

    TRANSITION_CHOICES = [
        (TRANSITION_APPROACHING, "Approaching depletion"),
    ]

    pharmacy = models.ForeignKey(
        Pharmacy,
        on_delete=models.CASCADE,
        related_name="notifications",
    )

    prescription = models.ForeignKey(
        Prescription,
        on_delete=models.CASCADE,
        related_name="notifications",
    )

    transition_type = models.CharField(
        max_length=30,
        choices=TRANSITION_CHOICES,
        default=TRANSITION_APPROACHING,
    )

    read = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "notifications"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["pharmacy", "read"]),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["pharmacy", "prescription", "transition_type"],
                name="unique_notification_per_transition",
            ),
        ]

    def __str__(self):
        return f"{self.transition_type}: prescription {self.prescription_id}"
