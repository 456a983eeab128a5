# products/catalog.py
from dataclasses import dataclass

from rest_framework.exceptions import ValidationError

from common.conf import marketplace_setting
from .filters import ProductFilter
from .models import Product


@dataclass
class CatalogPage:
    items: list
    total: int


def _positive_int(params, name, default):
    raw = params.get(name)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError({name: "Must be a whole number."})
    if value < 1:
        raise ValidationError({name: "Must be at least 1."})
    return value


def list_products(params, queryset=None):
    """
    Buyer-facing product listing.

    `params` is a query-dict-like mapping (see ProductFilter for the keys plus
    `page` and `limit`). Inactive and soft-deleted products are never listed.
    The total is counted over the whole filtered set before paging, and each
    returned product comes with its attributes, zones, tiers, images,
    supplier and category loaded.
    """
    page = _positive_int(params, "page", 1)
    limit = min(
        _positive_int(params, "limit", marketplace_setting("DEFAULT_PAGE_SIZE")),
        marketplace_setting("MAX_PAGE_SIZE"),
    )

    base = queryset if queryset is not None else Product.objects.all()
    filterset = ProductFilter(data=params, queryset=base.listable())
    if not filterset.is_valid():
        raise ValidationError(filterset.errors)

    filtered = filterset.qs
    total = filtered.count()
    offset = (page - 1) * limit
    items = list(filtered.with_details()[offset:offset + limit])
    return CatalogPage(items=items, total=total)


def get_product(product_id):
    """Single hydrated product, soft-deleted ones excluded."""
    return Product.objects.not_deleted().with_details().filter(pk=product_id).first()
