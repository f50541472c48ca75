"""
API URL configuration.
Includes all app routes.
"""

from django.urls import include, path

urlpatterns = [
    path("pharmacies/<int:pharmacy_id>/", include("apps.orders.pharmacy_urls")),
    path("pharmacies/<int:pharmacy_id>/notifications/", include("apps.notifications.urls")),
    path("orders/", include("apps.orders.urls")),
    path("prescriptions/", include("apps.prescriptions.urls")),
]
