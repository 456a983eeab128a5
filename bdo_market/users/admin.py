from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import Address, CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    list_display = ("id", "username", "email", "role", "is_active", "date_joined")
    list_filter = ("role", "is_active")
    search_fields = ("username", "email", "auth_id")
    fieldsets = UserAdmin.fieldsets + (("Marketplace", {"fields": ("role", "phone")}),)


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "city", "street", "is_default")
    search_fields = ("user__email", "city", "street")
