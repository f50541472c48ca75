"""
Patient models.
"""

from django.db import models

from apps.pharmacies.models import Pharmacy


class Patient(models.Model):
    """
    Patient of a pharmacy.

    Prescriptions can only be tracked once the patient has given consent
    (``consensus``); the contact and fulfillment fields are shown on the
    order dashboard so staff know how to hand over the next box.
    """

    FULFILLMENT_PICKUP = "pickup"
    FULFILLMENT_SHIPPING = "shipping"

    FULFILLMENT_CHOICES = [
        (FULFILLMENT_PICKUP, "Pickup"),
        (FULFILLMENT_SHIPPING, "Shipping"),
    ]

    pharmacy = models.ForeignKey(
        Pharmacy,
        on_delete=models.PROTECT,
        related_name="patients",
    )

    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)

    phone = models.CharField(max_length=50, blank=True, default="")
    email = models.EmailField(blank=True, default="")

    delivery_address = models.CharField(
        max_length=500,
        blank=True,
        default="",
        help_text="Required when fulfillment is shipping",
    )

    fulfillment = models.CharField(
        max_length=20,
        choices=FULFILLMENT_CHOICES,
        default=FULFILLMENT_PICKUP,
    )

    notes = models.TextField(blank=True, default="")

    consensus = models.BooleanField(
        default=False,
        help_text="Patient agreed to have prescriptions tracked",
    )
    consensus_date = models.DateField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "patients"
        ordering = ["last_name", "first_name"]
        indexes = [
            models.Index(fields=["pharmacy", "last_name", "first_name"]),
        ]

    def __str__(self):
        return f"{self.first_name} {self.last_name}"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"
