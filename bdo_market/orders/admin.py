# orders/admin.py
import csv

from django.contrib import admin
from django.http import HttpResponse

from .models import Order, OrderItem


def export_csv(modeladmin, request, queryset):
    """Export selected orders to CSV with order items details"""
    resp = HttpResponse(content_type="text/csv")
    resp["Content-Disposition"] = "attachment; filename=orders.csv"
    w = csv.writer(resp)
    w.writerow(["order_number", "product", "qty", "unit_price", "supplier", "payment_method", "status", "item_status"])

    for o in queryset.prefetch_related("items__product", "items__supplier"):
        for it in o.items.all():
            w.writerow([
                o.order_number,
                it.product.name_en,
                it.quantity,
                it.unit_price,
                it.supplier.business_name,
                o.payment_method,
                o.status,
                it.item_status,
            ])
    return resp


export_csv.short_description = "Export to CSV"


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = ("product", "supplier", "quantity", "unit_price", "subtotal", "shipping_cost", "supplier_payout")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("order_number", "buyer", "total_amount", "payment_method", "status", "created_at")
    list_filter = ("payment_method", "status", "payment_status")
    search_fields = ("order_number", "buyer__email")
    readonly_fields = ("order_number", "subtotal", "shipping_total", "platform_fee", "total_amount", "address_snapshot")
    inlines = [OrderItemInline]
    actions = [export_csv]


@admin.register(OrderItem)
class OrderItemAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "product", "supplier", "quantity", "unit_price", "subtotal", "item_status")
    list_filter = ("item_status", "supplier")
    search_fields = ("order__order_number", "product__name_en", "tracking_number")
