"""
Order and dashboard serializers.
"""

from django.utils import timezone
from rest_framework import serializers

from .models import Order


class OrderSerializer(serializers.ModelSerializer):
    medication_name = serializers.CharField(source="prescription.medication_name", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "prescription",
            "medication_name",
            "cycle_start_date",
            "estimated_depletion_date",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class DashboardEntrySerializer(serializers.Serializer):
    """Serializes DashboardEntry; computed fields use context["as_of"]."""

    order_id = serializers.IntegerField()
    prescription_id = serializers.IntegerField()
    cycle_start_date = serializers.DateField()
    estimated_depletion_date = serializers.DateField()
    order_status = serializers.CharField()
    medication_name = serializers.CharField()
    units_per_box = serializers.IntegerField()
    daily_consumption = serializers.DecimalField(max_digits=10, decimal_places=3)
    box_start_date = serializers.DateField()
    patient_id = serializers.IntegerField()
    first_name = serializers.CharField()
    last_name = serializers.CharField()
    fulfillment = serializers.CharField()
    delivery_address = serializers.CharField()
    phone = serializers.CharField()
    email = serializers.CharField()
    days_remaining = serializers.SerializerMethodField()
    prescription_status = serializers.SerializerMethodField()

    def _as_of(self):
        return self.context.get("as_of") or timezone.localdate()

    def get_days_remaining(self, entry):
        return entry.days_remaining(self._as_of())

    def get_prescription_status(self, entry):
        return entry.prescription_status(self._as_of())
