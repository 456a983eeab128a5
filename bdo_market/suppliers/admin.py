from django.contrib import admin

from .models import SupplierProfile


@admin.register(SupplierProfile)
class SupplierProfileAdmin(admin.ModelAdmin):
    list_display = ["business_name", "user", "status", "is_tax_registered", "approved_at", "created_at"]
    list_filter = ["status", "is_tax_registered"]
    search_fields = ["business_name", "business_name_ar", "user__email"]
    readonly_fields = ["created_at", "updated_at", "approved_at"]
