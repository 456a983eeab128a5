# products/pricing.py
from decimal import Decimal


def effective_unit_price(base_price, tiers, quantity):
    """
    Unit price for `quantity` given a product's tier table.

    Tiers are scanned in ascending `min_quantity` order and every tier whose
    inclusive range contains `quantity` overwrites the price, so when ranges
    overlap the last matching tier wins. No tiers, or no match, means the
    base price. Overlaps and gaps are not validated here.
    """
    price = Decimal(base_price)
    for tier in sorted(tiers, key=lambda t: t.min_quantity):
        if quantity >= tier.min_quantity and (tier.max_quantity is None or quantity <= tier.max_quantity):
            price = Decimal(tier.price_per_unit)
    return price
