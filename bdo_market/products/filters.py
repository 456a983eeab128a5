# products/filters.py
import django_filters
from django.db.models import Q

from .models import Product, ProductAttribute

# query parameter -> attribute_key in ProductAttribute
ATTRIBUTE_PARAMS = {
    "processing": ProductAttribute.PROCESSING_METHOD,
    "roast": ProductAttribute.ROAST_LEVEL,
    "origin": ProductAttribute.ORIGIN_COUNTRY,
    "brew": ProductAttribute.BREW_METHOD,
}

SORT_ORDERINGS = {
    "newest": ("-created_at",),
    "price_asc": ("base_price", "-created_at"),
    "price_desc": ("-base_price", "-created_at"),
}


class CharInFilter(django_filters.BaseInFilter, django_filters.CharFilter):
    """Comma separated list of values: ?roast=light,medium"""


class ProductFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method="filter_search")
    categoryId = django_filters.UUIDFilter(field_name="category_id")
    price_min = django_filters.NumberFilter(field_name="base_price", lookup_expr="gte")
    price_max = django_filters.NumberFilter(field_name="base_price", lookup_expr="lte")
    in_stock = django_filters.BooleanFilter(method="filter_in_stock")

    processing = CharInFilter()
    roast = CharInFilter()
    origin = CharInFilter()
    brew = CharInFilter()

    sort = django_filters.CharFilter(method="filter_sort")

    class Meta:
        model = Product
        fields = []

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(name_en__icontains=value) | Q(name_ar__icontains=value))

    def filter_in_stock(self, queryset, name, value):
        if value:
            return queryset.filter(stock_quantity__gt=0)
        return queryset

    def filter_sort(self, queryset, name, value):
        # unknown values fall back to newest first
        return queryset.order_by(*SORT_ORDERINGS.get(value, SORT_ORDERINGS["newest"]))

    def attribute_condition(self):
        """
        One OR'd condition across every requested attribute (within and across
        attribute types), or None when no attribute filter was given.
        """
        condition = None
        for param, key in ATTRIBUTE_PARAMS.items():
            values = [v for v in (self.form.cleaned_data.get(param) or []) if v]
            if not values:
                continue
            clause = Q(attribute_key=key, attribute_value_en__in=values)
            condition = clause if condition is None else condition | clause
        return condition

    def filter_queryset(self, queryset):
        queryset = queryset.order_by(*SORT_ORDERINGS["newest"])
        for name, value in self.form.cleaned_data.items():
            if name in ATTRIBUTE_PARAMS:
                continue
            queryset = self.filters[name].filter(queryset, value)

        condition = self.attribute_condition()
        if condition is not None:
            matching_ids = ProductAttribute.objects.filter(condition).values("product_id")
            queryset = queryset.filter(pk__in=matching_ids)
        return queryset
