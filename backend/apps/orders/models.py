"""
Order model.
"""

from django.db import models
from django.db.models import Q

from apps.prescriptions.models import Prescription


class Order(models.Model):
    """
    Restocking task for one box cycle of one prescription.

    Lifecycle: pending -> prepared -> fulfilled. No skips, no way back;
    fulfilled is terminal. At most one non-fulfilled order exists per
    (prescription, cycle_start_date).
    """

    STATUS_PENDING = "pending"
    STATUS_PREPARED = "prepared"
    STATUS_FULFILLED = "fulfilled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_PREPARED, "Prepared"),
        (STATUS_FULFILLED, "Fulfilled"),
    ]

    prescription = models.ForeignKey(
        Prescription,
        on_delete=models.PROTECT,
        related_name="orders",
    )

    cycle_start_date = models.DateField(
        help_text="Prescription box start date when the order was created",
    )

    estimated_depletion_date = models.DateField()

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "orders"
        ordering = ["estimated_depletion_date", "id"]
        indexes = [
            models.Index(fields=["status"]),
            models.Index(fields=["estimated_depletion_date"]),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["prescription", "cycle_start_date"],
                condition=~Q(status="fulfilled"),
                name="unique_active_order_per_cycle",
            ),
        ]

    def __str__(self):
        return f"Order #{self.id} - {self.prescription.medication_name} ({self.status})"


TRANSITIONS = {
    Order.STATUS_PENDING: Order.STATUS_PREPARED,
    Order.STATUS_PREPARED: Order.STATUS_FULFILLED,
}


def next_status(current):
    """Next lifecycle status, or None when ``current`` is terminal."""
    return TRANSITIONS.get(current)
