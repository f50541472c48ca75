"""
Prescription views.
"""

from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import Prescription
from .serializers import PrescriptionSerializer, RefillHistorySerializer, RefillSerializer
from .services import get_prescription_service


class PrescriptionViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    list: List prescriptions (``?patient=<id>`` to scope to one patient)
    retrieve: Get a prescription with its depletion estimate
    create: Create a prescription for a consenting patient
    update / partial_update: Change medication, box size, consumption or start date
    refill: Record a refill, starting a new box cycle
    refills: Archived box cycles
    """

    queryset = Prescription.objects.select_related("patient").all()
    serializer_class = PrescriptionSerializer
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        queryset = super().get_queryset()

        patient_id = self.request.query_params.get("patient")
        if patient_id:
            queryset = queryset.filter(patient_id=patient_id)

        return queryset

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["as_of"] = timezone.localdate()
        return context

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        prescription = get_prescription_service().create(
            patient_id=data["patient"].id,
            medication_name=data["medication_name"],
            units_per_box=data["units_per_box"],
            daily_consumption=data["daily_consumption"],
            box_start_date=data["box_start_date"],
        )
        return Response(
            self.get_serializer(prescription).data,
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        # The owning patient never changes.
        prescription = get_prescription_service().update(
            instance.id,
            medication_name=data.get("medication_name", instance.medication_name),
            units_per_box=data.get("units_per_box", instance.units_per_box),
            daily_consumption=data.get("daily_consumption", instance.daily_consumption),
            box_start_date=data.get("box_start_date", instance.box_start_date),
        )
        return Response(self.get_serializer(prescription).data)

    def partial_update(self, request, *args, **kwargs):
        kwargs["partial"] = True
        return self.update(request, *args, **kwargs)

    @action(detail=True, methods=["post"])
    def refill(self, request, pk=None):
        """Record a refill; the new box starts today unless given."""
        serializer = RefillSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_start_date = serializer.validated_data.get("new_start_date") or timezone.localdate()

        service = get_prescription_service()
        history = service.record_refill(int(pk), new_start_date)
        prescription = service.get(int(pk))

        return Response(
            {
                "prescription": self.get_serializer(prescription).data,
                "archived_cycle": RefillHistorySerializer(history).data,
            },
            status=status.HTTP_200_OK,
        )

    @action(detail=True, methods=["get"])
    def refills(self, request, pk=None):
        history = get_prescription_service().list_refills(int(pk))
        return Response(RefillHistorySerializer(history, many=True).data)
