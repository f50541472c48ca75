"""
Prescription serializers.
"""

from django.utils import timezone
from rest_framework import serializers

from .models import Prescription, RefillHistory


class PrescriptionSerializer(serializers.ModelSerializer):
    """
    Prescription with its depletion estimate.

    ``days_remaining`` and ``status`` are relative to ``as_of`` from the
    serializer context (today when absent).
    """

    estimated_depletion_date = serializers.DateField(read_only=True)
    days_remaining = serializers.SerializerMethodField()
    status = serializers.SerializerMethodField()
    patient_name = serializers.CharField(source="patient.full_name", read_only=True)

    class Meta:
        model = Prescription
        fields = [
            "id",
            "patient",
            "patient_name",
            "medication_name",
            "units_per_box",
            "daily_consumption",
            "box_start_date",
            "estimated_depletion_date",
            "days_remaining",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def _as_of(self):
        return self.context.get("as_of") or timezone.localdate()

    def get_days_remaining(self, obj):
        return obj.days_remaining(self._as_of())

    def get_status(self, obj):
        return obj.status(self._as_of())


class RefillSerializer(serializers.Serializer):
    new_start_date = serializers.DateField(required=False)


class RefillHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = RefillHistory
        fields = ["id", "prescription", "box_start_date", "box_end_date", "created_at"]
        read_only_fields = fields
