# common/testing.py
"""Small factories shared by the app test suites."""
import itertools
from decimal import Decimal

from django.contrib.auth import get_user_model

from products.models import PriceTier, Product, ProductAttribute, ShippingZone
from suppliers.models import SupplierProfile

User = get_user_model()
_seq = itertools.count(1)


def make_user(role="BUYER", email=None, password="pass1234"):
    n = next(_seq)
    email = email or f"user{n}@example.com"
    return User.objects.create_user(username=email, email=email, password=password, role=role)


def make_supplier(status=SupplierProfile.Status.APPROVED, email=None):
    user = make_user(role="SUPPLIER", email=email)
    profile = SupplierProfile.objects.create(
        user=user,
        business_name=f"Roastery {user.pk}",
        business_name_ar=f"محمصة {user.pk}",
        iban="SA0380000000608010167519",
        status=status,
    )
    return profile


def make_product(supplier=None, base_price="100.00", stock=10, tiers=(), zones=(), attributes=(), **extra):
    n = next(_seq)
    supplier = supplier or make_supplier()
    fields = {
        "name_en": f"Coffee {n}",
        "name_ar": f"قهوة {n}",
        "slug": f"coffee-{n}",
        "base_price": Decimal(base_price),
        "stock_quantity": stock,
    }
    fields.update(extra)
    product = Product.objects.create(supplier=supplier, **fields)
    for lo, hi, price in tiers:
        PriceTier.objects.create(product=product, min_quantity=lo, max_quantity=hi, price_per_unit=Decimal(price))
    for cost in zones:
        ShippingZone.objects.create(
            product=product, zone_name_en="Zone", zone_name_ar="منطقة", shipping_cost=Decimal(cost)
        )
    for key, value in attributes:
        ProductAttribute.objects.create(
            product=product, attribute_key=key, attribute_value_en=value, attribute_value_ar=value
        )
    return product
