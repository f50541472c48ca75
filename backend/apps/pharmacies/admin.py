from django.contrib import admin

from .models import Pharmacy


@admin.register(Pharmacy)
class PharmacyAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "phone", "email", "created_at"]
    search_fields = ["name", "email"]
