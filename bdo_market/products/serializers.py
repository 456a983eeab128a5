# products/serializers.py
import time

from django.db import transaction
from django.utils.crypto import get_random_string
from django.utils.http import int_to_base36
from django.utils.text import slugify
from rest_framework import serializers

from suppliers.serializers import SupplierSummarySerializer
from .models import Category, PriceTier, Product, ProductAttribute, ProductImage, ShippingZone


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name_en", "name_ar", "slug", "parent", "image_url", "sort_order", "is_active"]


class CategorySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name_en", "name_ar", "slug"]


class ProductImageSerializer(serializers.ModelSerializer):
    src = serializers.SerializerMethodField()

    class Meta:
        model = ProductImage
        fields = ["id", "src", "alt_text", "sort_order"]

    def get_src(self, obj):
        if obj.image:
            return obj.image.url
        return obj.url or None


class ProductAttributeSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductAttribute
        fields = ["attribute_key", "attribute_value_en", "attribute_value_ar"]


class ShippingZoneSerializer(serializers.ModelSerializer):
    class Meta:
        model = ShippingZone
        fields = ["zone_name_en", "zone_name_ar", "shipping_cost", "estimated_days", "allows_cod"]


class PriceTierSerializer(serializers.ModelSerializer):
    class Meta:
        model = PriceTier
        fields = ["min_quantity", "max_quantity", "price_per_unit"]

    def validate(self, attrs):
        upper = attrs.get("max_quantity")
        if upper is not None and upper < attrs["min_quantity"]:
            raise serializers.ValidationError("max_quantity must be >= min_quantity")
        return attrs


class ProductSerializer(serializers.ModelSerializer):
    """Flat product row, used for supplier/admin lists and write responses."""
    class Meta:
        model = Product
        fields = [
            "id", "supplier", "category", "name_en", "name_ar", "description_en", "description_ar",
            "slug", "base_price", "unit", "stock_quantity", "min_order_quantity",
            "is_active", "deleted_at", "created_at", "updated_at",
        ]
        read_only_fields = fields


class ProductDetailSerializer(ProductSerializer):
    """Product with everything the storefront shows next to it."""
    attributes = ProductAttributeSerializer(many=True, read_only=True)
    shipping_zones = ShippingZoneSerializer(many=True, read_only=True)
    price_tiers = PriceTierSerializer(many=True, read_only=True)
    images = ProductImageSerializer(many=True, read_only=True)
    supplier = SupplierSummarySerializer(read_only=True)
    category = CategorySummarySerializer(read_only=True)

    class Meta(ProductSerializer.Meta):
        fields = ProductSerializer.Meta.fields + ["attributes", "shipping_zones", "price_tiers", "images"]
        read_only_fields = fields


class ProductWriteSerializer(serializers.ModelSerializer):
    """
    Supplier-authored product body. Nested lists are optional; when one is
    sent it replaces what the product had.
    """
    category = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(), required=False, allow_null=True
    )
    attributes = ProductAttributeSerializer(many=True, required=False)
    shipping_zones = ShippingZoneSerializer(many=True, required=False)
    price_tiers = PriceTierSerializer(many=True, required=False)

    NESTED = {
        "attributes": ProductAttribute,
        "shipping_zones": ShippingZone,
        "price_tiers": PriceTier,
    }

    class Meta:
        model = Product
        fields = [
            "category", "name_en", "name_ar", "description_en", "description_ar",
            "base_price", "unit", "stock_quantity", "min_order_quantity", "is_active",
            "attributes", "shipping_zones", "price_tiers",
        ]

    def _pop_nested(self, validated_data):
        return {name: validated_data.pop(name) for name in self.NESTED if name in validated_data}

    def _replace_nested(self, product, nested):
        for name, rows in nested.items():
            model = self.NESTED[name]
            model.objects.filter(product=product).delete()
            model.objects.bulk_create([model(product=product, **row) for row in rows])

    @staticmethod
    def make_slug(name_en):
        stamp = int_to_base36(int(time.time() * 1000))
        suffix = get_random_string(4, "abcdefghijklmnopqrstuvwxyz0123456789")
        return f"{slugify(name_en)[:250]}-{stamp}{suffix}"

    @transaction.atomic
    def create(self, validated_data):
        nested = self._pop_nested(validated_data)
        validated_data.setdefault("slug", self.make_slug(validated_data["name_en"]))
        product = Product.objects.create(**validated_data)
        self._replace_nested(product, nested)
        return product

    @transaction.atomic
    def update(self, instance, validated_data):
        nested = self._pop_nested(validated_data)
        locked = Product.objects.select_for_update().get(pk=instance.pk)
        instance.stock_quantity = locked.stock_quantity
        for field, value in validated_data.items():
            setattr(instance, field, value)
        # only sent columns; stock is otherwise owned by checkout decrements
        if validated_data:
            instance.save(update_fields=[*validated_data, "updated_at"])
        self._replace_nested(instance, nested)
        return instance
