from django.contrib import admin

from .models import Prescription, RefillHistory


class RefillHistoryInline(admin.TabularInline):
    model = RefillHistory
    extra = 0
    readonly_fields = ["box_start_date", "box_end_date", "created_at"]


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "patient",
        "medication_name",
        "units_per_box",
        "daily_consumption",
        "box_start_date",
    ]
    search_fields = ["medication_name", "patient__first_name", "patient__last_name"]
    list_filter = ["patient__pharmacy"]
    inlines = [RefillHistoryInline]
