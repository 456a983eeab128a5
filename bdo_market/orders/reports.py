# orders/reports.py
"""Back-office numbers. Plain sums over orders and order items."""
from decimal import Decimal

from django.db.models import Count, DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from suppliers.models import SupplierProfile
from .models import Order, OrderItem

ZERO = Value(Decimal("0.00"), output_field=DecimalField(max_digits=12, decimal_places=2))


def _sum(field, **extra):
    return Coalesce(Sum(field, **extra), ZERO)


def supplier_dashboard(profile):
    items = OrderItem.objects.filter(supplier=profile)
    month_start = timezone.now().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    totals = items.aggregate(
        total_sales=_sum("subtotal"),
        monthly_revenue=_sum("subtotal", filter=Q(created_at__gte=month_start)),
        pending_orders=Count("id", filter=Q(item_status=OrderItem.ItemStatus.PENDING)),
    )
    totals["active_products"] = profile.products.filter(is_active=True, deleted_at__isnull=True).count()
    totals["recent_orders"] = list(items.select_related("order", "product")[:5])
    return totals


def supplier_finances(profile):
    items = OrderItem.objects.filter(supplier=profile)
    totals = items.aggregate(total_earned=_sum("subtotal"), net_payout=_sum("supplier_payout"))
    totals["platform_fees"] = totals["total_earned"] - totals["net_payout"]
    totals["transactions"] = list(items.select_related("order", "product"))
    return totals


def platform_dashboard():
    today = timezone.now().replace(hour=0, minute=0, second=0, microsecond=0)
    totals = Order.objects.aggregate(
        total_revenue=_sum("total_amount"),
        platform_fees=_sum("platform_fee"),
        total_orders=Count("id"),
        today_orders=Count("id", filter=Q(created_at__gte=today)),
    )
    totals.update(SupplierProfile.objects.aggregate(
        active_suppliers=Count("id", filter=Q(status=SupplierProfile.Status.APPROVED)),
        pending_approvals=Count("id", filter=Q(status=SupplierProfile.Status.PENDING)),
    ))
    return totals


def platform_finances():
    totals = Order.objects.aggregate(total_revenue=_sum("total_amount"), total_fees=_sum("platform_fee"))
    # shipping is passed through to suppliers, so it counts as payout here
    totals["supplier_payouts"] = totals["total_revenue"] - totals["total_fees"]
    suppliers = (
        SupplierProfile.objects.filter(status=SupplierProfile.Status.APPROVED)
        .annotate(total_sales=_sum("order_items__subtotal"), payout=_sum("order_items__supplier_payout"))
        .order_by("business_name")
    )
    totals["suppliers"] = [
        {
            "supplier_id": s.pk,
            "business_name": s.business_name_ar,
            "total_sales": s.total_sales,
            "fees": s.total_sales - s.payout,
            "payout": s.payout,
        }
        for s in suppliers
    ]
    return totals
