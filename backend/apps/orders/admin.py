"""
Order admin configuration.
"""

from django.contrib import admin

from .models import Order


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "prescription",
        "cycle_start_date",
        "estimated_depletion_date",
        "status",
        "created_at",
    ]
    list_filter = ["status", "estimated_depletion_date"]
    search_fields = [
        "prescription__medication_name",
        "prescription__patient__first_name",
        "prescription__patient__last_name",
    ]
    readonly_fields = ["id", "cycle_start_date", "estimated_depletion_date", "created_at", "updated_at"]
    ordering = ["estimated_depletion_date"]

    fieldsets = (
        (None, {
            "fields": ("id", "prescription", "status")
        }),
        ("Box Cycle", {
            "fields": ("cycle_start_date", "estimated_depletion_date"),
        }),
        ("Timestamps", {
            "fields": ("created_at", "updated_at"),
        }),
    )
