# products/admin.py
from django.contrib import admin

from .models import Category, PriceTier, Product, ProductAttribute, ProductImage, ShippingZone


class PriceTierInline(admin.TabularInline):
    model = PriceTier
    extra = 0


class ShippingZoneInline(admin.TabularInline):
    model = ShippingZone
    extra = 0


class ProductAttributeInline(admin.TabularInline):
    model = ProductAttribute
    extra = 0


class ProductImageInline(admin.TabularInline):
    model = ProductImage
    extra = 0


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("id", "name_en", "base_price", "stock_quantity", "unit", "is_active", "supplier")
    list_editable = ("base_price", "stock_quantity", "is_active")
    list_filter = ("is_active", "unit", "category", "supplier")
    search_fields = ("name_en", "name_ar", "slug")
    inlines = [PriceTierInline, ShippingZoneInline, ProductAttributeInline, ProductImageInline]


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name_en", "name_ar", "slug", "sort_order", "is_active")
    list_editable = ("sort_order", "is_active")
    search_fields = ("name_en", "name_ar", "slug")
    prepopulated_fields = {"slug": ("name_en",)}
