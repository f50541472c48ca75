from django.contrib import admin

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ["id", "pharmacy", "prescription", "transition_type", "read", "created_at"]
    list_filter = ["pharmacy", "transition_type", "read"]
    readonly_fields = ["created_at"]
