"""
Pharmacy model.
"""

from django.db import models


class Pharmacy(models.Model):
    """
    A pharmacy owns its patients, and through them their prescriptions,
    orders and notifications.
    """

    name = models.CharField(max_length=200)
    address = models.CharField(max_length=500, blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")
    email = models.EmailField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "pharmacies"
        ordering = ["name"]
        verbose_name_plural = "Pharmacies"

    def __str__(self):
        return self.name
