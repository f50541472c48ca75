"""
Notification serializers.
"""

from rest_framework import serializers

from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    medication_name = serializers.CharField(source="prescription.medication_name", read_only=True)
    patient_id = serializers.IntegerField(source="prescription.patient_id", read_only=True)
    patient_name = serializers.CharField(source="prescription.patient.full_name", read_only=True)
    estimated_depletion_date = serializers.DateField(
        source="prescription.estimated_depletion_date",
        read_only=True,
    )

    class Meta:
        model = Notification
        fields = [
            "id",
            "pharmacy",
            "prescription",
            "transition_type",
            "read",
            "created_at",
            "medication_name",
            "patient_id",
            "patient_name",
            "estimated_depletion_date",
        ]
        read_only_fields = fields
