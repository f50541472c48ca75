"""
Notification inbox views.
"""

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import NotificationSerializer
from .services import get_notification_service


class NotificationListView(APIView):
    """GET /api/v1/pharmacies/{pharmacy_id}/notifications/"""

    def get(self, request, pharmacy_id):
        service = get_notification_service()
        notifications = service.list(pharmacy_id)
        return Response(
            {
                "unread_count": service.count_unread(pharmacy_id),
                "notifications": NotificationSerializer(notifications, many=True).data,
            }
        )


class NotificationMarkReadView(APIView):
    """POST /api/v1/pharmacies/{pharmacy_id}/notifications/{id}/read/"""

    def post(self, request, pharmacy_id, notification_id):
        get_notification_service().mark_read(notification_id, pharmacy_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class NotificationMarkAllReadView(APIView):
    """POST /api/v1/pharmacies/{pharmacy_id}/notifications/read-all/"""

    def post(self, request, pharmacy_id):
        updated = get_notification_service().mark_all_read(pharmacy_id)
        return Response({"updated": updated})
