# orders/services.py
import logging

from django.db import transaction
from django.db.models import F
from django.shortcuts import get_object_or_404

from common.exceptions import InsufficientStock, InvalidTransition
from products.models import Product
from .assembly import LineRequest, assemble_order
from .models import Order, OrderItem

logger = logging.getLogger(__name__)


def commit_order(draft):
    """
    Persist an assembled order in one transaction:

    1. lock the affected product rows and re-check stock against the total
       quantity requested per product,
    2. insert the order,
    3. insert its items,
    4. decrement stock relatively (`stock - qty`, guarded by `stock >= qty`).

    Any failure rolls the whole thing back: no order, no items, no stock change.
    """
    decrements = sorted(draft.stock_decrements.items(), key=lambda kv: str(kv[0]))
    with transaction.atomic():
        # ascending pk so concurrent checkouts lock rows in the same order
        locked = {
            p.pk: p
            for p in Product.objects.select_for_update()
            .filter(pk__in=[pk for pk, _ in decrements])
            .order_by("pk")
        }
        for product_id, quantity in decrements:
            product = locked.get(product_id)
            if product is None or product.stock_quantity < quantity:
                raise InsufficientStock(
                    product_id,
                    product.name_en if product else None,
                    available=product.stock_quantity if product else 0,
                )

        order = Order.objects.create(**draft.order)
        OrderItem.objects.bulk_create(
            [OrderItem(order=order, **item.as_fields()) for item in draft.items]
        )

        for product_id, quantity in decrements:
            updated = (
                Product.objects.filter(pk=product_id, stock_quantity__gte=quantity)
                .update(stock_quantity=F("stock_quantity") - quantity)
            )
            if not updated:
                raise InsufficientStock(product_id, locked[product_id].name_en)
    return order


def place_order(buyer, lines, payment_method=Order.PaymentMethod.COD, address=None, notes=""):
    """
    Checkout for `buyer`: assemble, then commit. `lines` is a list of
    LineRequest (or `{"productId", "quantity"}` dicts). Raises the first
    assembly error, or InsufficientStock from the commit; nothing is
    persisted in either case. Retrying creates a new order number.
    """
    lines = [
        line if isinstance(line, LineRequest) else LineRequest(line["productId"], line["quantity"])
        for line in lines
    ]
    draft = assemble_order(buyer, lines, payment_method, address=address, notes=notes)
    if not draft.is_valid:
        logger.info("Checkout rejected for buyer %s: %s", buyer.pk, draft.errors[0].detail)
        raise draft.errors[0]

    try:
        order = commit_order(draft)
    except InsufficientStock as exc:
        logger.warning("Stock changed during checkout for buyer %s: %s", buyer.pk, exc.detail)
        raise

    logger.info(
        "Order %s placed by %s: %d item(s), total %s, status %s",
        order.order_number, buyer.pk, len(draft.items), order.total_amount, order.status,
    )
    return order


def update_item_status(supplier_profile, item_id, item_status, tracking_number=None):
    """
    Move one of the supplier's order items forward
    (PENDING -> PROCESSING -> SHIPPED -> DELIVERED). Other suppliers' items
    are reported as not found. The parent order's status is left alone.
    """
    with transaction.atomic():
        item = get_object_or_404(
            OrderItem.objects.select_for_update(), pk=item_id, supplier=supplier_profile
        )
        if item_status != item.item_status and not item.can_advance_to(item_status):
            raise InvalidTransition(f"Cannot move item from {item.item_status} to {item_status}.")

        item.item_status = item_status
        fields = ["item_status", "updated_at"]
        if tracking_number:
            item.tracking_number = tracking_number
            fields.append("tracking_number")
        item.save(update_fields=fields)

    logger.info("Item %s of order %s is now %s", item.pk, item.order_id, item.item_status)
    return item
