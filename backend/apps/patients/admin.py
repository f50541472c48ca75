from django.contrib import admin

from .models import Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ["id", "last_name", "first_name", "pharmacy", "fulfillment", "consensus"]
    list_filter = ["pharmacy", "fulfillment", "consensus"]
    search_fields = ["first_name", "last_name", "phone", "email"]
