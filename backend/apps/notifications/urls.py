"""
Notification URL configuration (mounted under a pharmacy).
"""

from django.urls import path

from . import views

urlpatterns = [
    path("", views.NotificationListView.as_view(), name="notification-list"),
    path("read-all/", views.NotificationMarkAllReadView.as_view(), name="notification-read-all"),
    path(
        "<int:notification_id>/read/",
        views.NotificationMarkReadView.as_view(),
        name="notification-read",
    ),
]
