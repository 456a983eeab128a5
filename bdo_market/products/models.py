# products/models.py
import uuid

from django.core.validators import MinValueValidator
from django.db import models


class Category(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name_en = models.CharField(max_length=120)
    name_ar = models.CharField(max_length=120)
    slug = models.SlugField(max_length=140, unique=True)
    parent = models.ForeignKey(
        "self", on_delete=models.SET_NULL, null=True, blank=True, related_name="children"
    )
    image_url = models.URLField(blank=True)
    sort_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["sort_order", "name_en"]
        verbose_name_plural = "categories"

    def __str__(self):
        return self.name_en


class ProductQuerySet(models.QuerySet):
    def not_deleted(self):
        return self.filter(deleted_at__isnull=True)

    def listable(self):
        """What buyers may see in the catalog."""
        return self.not_deleted().filter(is_active=True)

    def with_details(self):
        return self.select_related("supplier", "category").prefetch_related(
            "attributes", "shipping_zones", "price_tiers", "images"
        )


class Product(models.Model):
    class Unit(models.TextChoices):
        KG = "KG", "Kilogram"
        G = "G", "Gram"
        PACK = "PACK", "Pack"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    supplier = models.ForeignKey(
        "suppliers.SupplierProfile", on_delete=models.PROTECT, related_name="products"
    )
    category = models.ForeignKey(
        Category, on_delete=models.SET_NULL, null=True, blank=True, related_name="products"
    )
    name_en = models.CharField(max_length=255)
    name_ar = models.CharField(max_length=255)
    description_en = models.TextField(blank=True)
    description_ar = models.TextField(blank=True)
    slug = models.SlugField(max_length=300, unique=True)

    base_price = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(0)]
    )
    unit = models.CharField(max_length=4, choices=Unit.choices, default=Unit.KG)
    stock_quantity = models.PositiveIntegerField(default=0)
    min_order_quantity = models.PositiveIntegerField(default=1)

    is_active = models.BooleanField(default=True)
    deleted_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProductQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.name_en


class ProductImage(models.Model):
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="images")
    image = models.ImageField(upload_to="product_images/", null=True, blank=True)
    url = models.URLField(blank=True)
    alt_text = models.CharField(max_length=255, blank=True)
    sort_order = models.IntegerField(default=0)

    class Meta:
        ordering = ["sort_order", "id"]


class ProductAttribute(models.Model):
    # keys the catalog filters on
    PROCESSING_METHOD = "processing_method"
    ROAST_LEVEL = "roast_level"
    ORIGIN_COUNTRY = "origin_country"
    BREW_METHOD = "brew_method"

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="attributes")
    attribute_key = models.CharField(max_length=60, db_index=True)
    attribute_value_en = models.CharField(max_length=120)
    attribute_value_ar = models.CharField(max_length=120)

    def __str__(self):
        return f"{self.attribute_key}={self.attribute_value_en}"


class ShippingZone(models.Model):
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="shipping_zones")
    zone_name_en = models.CharField(max_length=120)
    zone_name_ar = models.CharField(max_length=120)
    shipping_cost = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    estimated_days = models.PositiveIntegerField(null=True, blank=True)
    allows_cod = models.BooleanField(default=True)

    class Meta:
        # "first configured zone" means insertion order
        ordering = ["id"]


class PriceTier(models.Model):
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="price_tiers")
    min_quantity = models.PositiveIntegerField()
    max_quantity = models.PositiveIntegerField(null=True, blank=True)  # null = unbounded
    price_per_unit = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])

    class Meta:
        ordering = ["min_quantity", "id"]

    def __str__(self):
        upper = self.max_quantity if self.max_quantity is not None else "+"
        return f"{self.min_quantity}-{upper} @ {self.price_per_unit}"
