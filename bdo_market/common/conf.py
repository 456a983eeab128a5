# common/conf.py
from decimal import Decimal

from django.conf import settings

# Marketplace policy constants. Override any of them through settings.MARKETPLACE.
DEFAULTS = {
    "PLATFORM_FEE_RATE": Decimal("0.05"),
    # orders always take the cost of this zone; there is no address matching
    "SHIPPING_ZONE_INDEX": 0,
    "ORDER_NUMBER_PREFIX": "BDO",
    "DEFAULT_PAGE_SIZE": 12,
    "MAX_PAGE_SIZE": 100,
    "ADMIN_PRODUCT_LIMIT": 100,
    "IDENTITY_PROVIDER": "users.identity.JWTIdentityProvider",
}


def marketplace_setting(name):
    """Return a marketplace setting, falling back to the documented default."""
    if name not in DEFAULTS:
        raise KeyError(f"Unknown marketplace setting: {name}")
    overrides = getattr(settings, "MARKETPLACE", {}) or {}
    return overrides.get(name, DEFAULTS[name])


def platform_fee_rate():
    return Decimal(str(marketplace_setting("PLATFORM_FEE_RATE")))
