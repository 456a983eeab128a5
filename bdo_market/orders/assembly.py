# orders/assembly.py
"""
Turns a buyer's requested lines into everything the commit step needs:
order fields, item rows and per-product stock decrements. Nothing here
writes to the database.
"""
import secrets
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from django.utils.http import int_to_base36

from common.conf import marketplace_setting, platform_fee_rate
from common.exceptions import InsufficientStock, ProductNotFound
from products.models import Product
from products.pricing import effective_unit_price
from .models import Order

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def money(value):
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass
class LineRequest:
    product_id: object
    quantity: int


@dataclass
class ItemDraft:
    product: Product
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    shipping_cost: Decimal
    supplier_payout: Decimal

    def as_fields(self):
        return {
            "product": self.product,
            "supplier_id": self.product.supplier_id,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "subtotal": self.subtotal,
            "shipping_cost": self.shipping_cost,
            "supplier_payout": self.supplier_payout,
        }


@dataclass
class OrderDraft:
    order: dict = field(default_factory=dict)
    items: list = field(default_factory=list)
    # product id -> total quantity requested across all lines
    stock_decrements: "OrderedDict" = field(default_factory=OrderedDict)
    errors: list = field(default_factory=list)

    @property
    def is_valid(self):
        return not self.errors


def generate_order_number():
    """`BDO-<base36 millis><random>`; the unique column rejects a collision."""
    prefix = marketplace_setting("ORDER_NUMBER_PREFIX")
    stamp = int_to_base36(int(time.time() * 1000)).upper()
    return f"{prefix}-{stamp}{secrets.token_hex(2).upper()}"


def shipping_cost_for(product):
    # Policy: a configured zone index (the first zone by default). The buyer's
    # address is not matched against zones.
    zones = list(product.shipping_zones.all())
    index = marketplace_setting("SHIPPING_ZONE_INDEX")
    if not zones or index >= len(zones):
        return ZERO
    return money(zones[index].shipping_cost)


def initial_status(payment_method):
    if payment_method == Order.PaymentMethod.COD:
        return Order.Status.CONFIRMED
    return Order.Status.PENDING_PAYMENT


def assemble_order(buyer, lines, payment_method, address=None, notes=""):
    """
    Price every line and total the order.

    Lines that reference a missing product or exceed current stock are
    recorded in `draft.errors` (in line order) instead of raising, so the
    caller sees every problem at once.
    """
    fee_rate = platform_fee_rate()
    draft = OrderDraft()
    product_ids = [line.product_id for line in lines]
    products = {
        str(p.pk): p
        for p in Product.objects.listable()
        .filter(pk__in=product_ids)
        .prefetch_related("price_tiers", "shipping_zones")
    }

    subtotal = ZERO
    shipping_total = ZERO
    for line in lines:
        product = products.get(str(line.product_id))
        if product is None:
            draft.errors.append(ProductNotFound(line.product_id))
            continue
        requested = draft.stock_decrements.get(product.pk, 0) + line.quantity
        if product.stock_quantity < requested:
            draft.errors.append(
                InsufficientStock(product.pk, product.name_en, available=product.stock_quantity)
            )
            continue

        unit_price = money(effective_unit_price(product.base_price, product.price_tiers.all(), line.quantity))
        item_subtotal = money(unit_price * line.quantity)
        shipping_cost = shipping_cost_for(product)
        payout = money(item_subtotal * (Decimal("1") - fee_rate))

        draft.items.append(ItemDraft(
            product=product,
            quantity=line.quantity,
            unit_price=unit_price,
            subtotal=item_subtotal,
            shipping_cost=shipping_cost,
            supplier_payout=payout,
        ))
        draft.stock_decrements[product.pk] = draft.stock_decrements.get(product.pk, 0) + line.quantity
        subtotal += item_subtotal
        shipping_total += shipping_cost

    draft.order = {
        "buyer": buyer,
        "order_number": generate_order_number(),
        "status": initial_status(payment_method),
        "payment_method": payment_method,
        "payment_status": Order.PaymentStatus.PENDING,
        "subtotal": money(subtotal),
        "shipping_total": money(shipping_total),
        "platform_fee": money(subtotal * fee_rate),
        "total_amount": money(subtotal + shipping_total),
        "notes": notes or "",
        "address_snapshot": dict(address) if address else None,
    }
    return draft
