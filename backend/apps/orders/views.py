"""
Order views.
"""

from django.db import transaction
from django.utils import timezone
from rest_framework import mixins, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.exceptions import NotFoundError
from apps.notifications.services import get_notification_service
from apps.pharmacies.models import Pharmacy

from .dashboard import DashboardFilters, assemble_dashboard
from .models import Order
from .serializers import DashboardEntrySerializer, OrderSerializer
from .services import get_lookahead_days, get_order_service


class DashboardView(APIView):
    """
    GET /api/v1/pharmacies/{pharmacy_id}/dashboard/

    Query params (all optional):
    - prescription_status: ok | approaching | depleted | all
    - order_status: pending | prepared | fulfilled | all (default hides fulfilled)
    - date_from, date_to: YYYY-MM-DD bounds on the estimated depletion date

    Viewing the dashboard creates the orders due in the lookahead window
    and the approaching-depletion notifications.
    """

    def get(self, request, pharmacy_id):
        if not Pharmacy.objects.filter(pk=pharmacy_id).exists():
            raise NotFoundError(
                message="Pharmacy not found",
                detail=f"Pharmacy {pharmacy_id} does not exist.",
                code="PHARMACY_NOT_FOUND",
            )

        as_of = timezone.localdate()
        lookahead_days = get_lookahead_days()
        filters = DashboardFilters.from_query_params(request.query_params)
        notification_service = get_notification_service()

        entries = assemble_dashboard(
            pharmacy_id,
            as_of,
            filters,
            lookahead_days,
            order_service=get_order_service(),
            notification_service=notification_service,
        )

        return Response(
            {
                "pharmacy_id": pharmacy_id,
                "as_of": as_of,
                "lookahead_days": lookahead_days,
                "filters": filters.as_dict(),
                "count": len(entries),
                "unread_notifications": notification_service.count_unread(pharmacy_id),
                "entries": DashboardEntrySerializer(
                    entries,
                    many=True,
                    context={"as_of": as_of},
                ).data,
            }
        )


class OrderViewSet(mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    retrieve: Get a single order
    advance: Move the order to its next status
    """

    queryset = Order.objects.select_related("prescription").all()
    serializer_class = OrderSerializer
    lookup_value_regex = r"\d+"

    @action(detail=True, methods=["post"])
    def advance(self, request, pk=None):
        """
        POST /api/v1/orders/{id}/advance/

        Reaching fulfilled also records the refill; both happen in one
        transaction.
        """
        with transaction.atomic():
            order = get_order_service().advance_status(int(pk), timezone.localdate())

        order = Order.objects.select_related("prescription").get(pk=order.pk)
        return Response(OrderSerializer(order).data)
