import io
import tempfile
from decimal import Decimal
from types import SimpleNamespace

from PIL import Image
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from common.testing import make_product, make_supplier, make_user
from orders.services import place_order
from products.catalog import list_products
from products.models import Category, Product, ProductAttribute, ProductImage
from products.pricing import effective_unit_price
from products.serializers import ProductWriteSerializer
from suppliers.models import SupplierProfile


def make_image_file(name="test.png", size=(10, 10), color=(120, 72, 40)):
    file = io.BytesIO()
    Image.new("RGB", size, color).save(file, format="PNG")
    file.seek(0)
    return SimpleUploadedFile(name, file.read(), content_type="image/png")


def tier(lo, hi, price):
    return SimpleNamespace(min_quantity=lo, max_quantity=hi, price_per_unit=Decimal(price))


class EffectiveUnitPriceTests(SimpleTestCase):
    def setUp(self):
        self.tiers = [tier(10, None, "80.00"), tier(1, 4, "100.00"), tier(5, 9, "90.00")]

    def test_picks_bracket_for_quantity(self):
        self.assertEqual(effective_unit_price(Decimal("120.00"), self.tiers, 3), Decimal("100.00"))
        self.assertEqual(effective_unit_price(Decimal("120.00"), self.tiers, 7), Decimal("90.00"))
        self.assertEqual(effective_unit_price(Decimal("120.00"), self.tiers, 15), Decimal("80.00"))

    def test_bounds_are_inclusive(self):
        self.assertEqual(effective_unit_price(Decimal("120.00"), self.tiers, 5), Decimal("90.00"))
        self.assertEqual(effective_unit_price(Decimal("120.00"), self.tiers, 9), Decimal("90.00"))

    def test_no_tiers_returns_base_price(self):
        for qty in (1, 6, 500):
            self.assertEqual(effective_unit_price(Decimal("42.50"), [], qty), Decimal("42.50"))

    def test_no_matching_tier_returns_base_price(self):
        gapped = [tier(5, 9, "90.00")]
        self.assertEqual(effective_unit_price(Decimal("100.00"), gapped, 2), Decimal("100.00"))

    def test_overlapping_tiers_last_match_wins(self):
        # both match 6; 4-10 sorts after 1-8 so it wins regardless of input order
        overlapping = [tier(4, 10, "70.00"), tier(1, 8, "95.00")]
        self.assertEqual(effective_unit_price(Decimal("100.00"), overlapping, 6), Decimal("70.00"))
        self.assertEqual(effective_unit_price(Decimal("100.00"), list(reversed(overlapping)), 6), Decimal("70.00"))

    def test_unbounded_tier_can_be_overridden_by_later_tier(self):
        overlapping = [tier(1, None, "99.00"), tier(3, 5, "85.00")]
        self.assertEqual(effective_unit_price(Decimal("100.00"), overlapping, 4), Decimal("85.00"))
        self.assertEqual(effective_unit_price(Decimal("100.00"), overlapping, 6), Decimal("99.00"))


class CatalogQueryTests(TestCase):
    def setUp(self):
        self.supplier = make_supplier()
        self.coffee = Category.objects.create(name_en="Coffee", name_ar="قهوة", slug="coffee", sort_order=1)
        self.light = make_product(
            self.supplier, base_price="50.00", stock=5, name_en="Ethiopia Light", name_ar="إثيوبيا",
            category=self.coffee, attributes=[(ProductAttribute.ROAST_LEVEL, "light")],
        )
        self.natural = make_product(
            self.supplier, base_price="80.00", stock=0, name_en="Brazil Natural", name_ar="برازيل",
            attributes=[(ProductAttribute.PROCESSING_METHOD, "natural")],
        )
        self.dark = make_product(
            self.supplier, base_price="120.00", stock=3, name_en="Sumatra Dark", name_ar="سومطرة",
            category=self.coffee, attributes=[(ProductAttribute.ROAST_LEVEL, "dark")],
            tiers=[(1, 4, "120.00"), (5, None, "100.00")], zones=["15.00"],
        )

    def ids(self, page):
        return {p.pk for p in page.items}

    def test_inactive_and_deleted_products_are_never_listed(self):
        make_product(self.supplier, is_active=False, name_en="Hidden")
        make_product(self.supplier, deleted_at=timezone.now(), name_en="Gone")
        page = list_products({})
        self.assertEqual(page.total, 3)
        self.assertEqual(self.ids(page), {self.light.pk, self.natural.pk, self.dark.pk})

    def test_attribute_filter_without_matches_is_empty_not_error(self):
        page = list_products({"roast": "medium"})
        self.assertEqual(page.items, [])
        self.assertEqual(page.total, 0)

    def test_attribute_filters_are_ored_across_types(self):
        page = list_products({"roast": "light", "processing": "natural"})
        self.assertEqual(self.ids(page), {self.light.pk, self.natural.pk})

    def test_attribute_values_are_ored_within_type(self):
        page = list_products({"roast": "light,dark"})
        self.assertEqual(self.ids(page), {self.light.pk, self.dark.pk})

    def test_attribute_filters_are_anded_with_other_filters(self):
        page = list_products({"roast": "light,dark", "price_max": "100"})
        self.assertEqual(self.ids(page), {self.light.pk})

    def test_search_matches_either_locale_case_insensitively(self):
        self.assertEqual(self.ids(list_products({"search": "sumatra"})), {self.dark.pk})
        self.assertEqual(self.ids(list_products({"search": "برازيل"})), {self.natural.pk})

    def test_price_range_is_inclusive(self):
        page = list_products({"price_min": "50", "price_max": "80"})
        self.assertEqual(self.ids(page), {self.light.pk, self.natural.pk})

    def test_in_stock_and_category(self):
        self.assertEqual(self.ids(list_products({"in_stock": "true"})), {self.light.pk, self.dark.pk})
        page = list_products({"categoryId": str(self.coffee.pk), "in_stock": "true"})
        self.assertEqual(self.ids(page), {self.light.pk, self.dark.pk})

    def test_sort_by_price(self):
        asc = [p.pk for p in list_products({"sort": "price_asc"}).items]
        desc = [p.pk for p in list_products({"sort": "price_desc"}).items]
        self.assertEqual(asc, [self.light.pk, self.natural.pk, self.dark.pk])
        self.assertEqual(desc, list(reversed(asc)))

    def test_total_counts_before_paging(self):
        page = list_products({"sort": "price_asc", "page": "2", "limit": "2"})
        self.assertEqual(page.total, 3)
        self.assertEqual([p.pk for p in page.items], [self.dark.pk])

    def test_page_past_the_end_is_empty(self):
        page = list_products({"page": "5", "limit": "2"})
        self.assertEqual(page.items, [])
        self.assertEqual(page.total, 3)


class ProductApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.supplier = make_supplier()
        self.product = make_product(
            self.supplier, base_price="100.00", stock=10,
            tiers=[(5, 9, "90.00")], zones=["20.00"],
            attributes=[(ProductAttribute.ORIGIN_COUNTRY, "Ethiopia")],
        )

    def test_listing_is_public_and_hydrated(self):
        r = self.client.get("/api/products/", {"origin": "Ethiopia"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["total"], 1)
        item = r.data["products"][0]
        self.assertEqual(item["id"], str(self.product.pk))
        self.assertEqual(len(item["price_tiers"]), 1)
        self.assertEqual(item["shipping_zones"][0]["shipping_cost"], "20.00")
        self.assertEqual(item["attributes"][0]["attribute_value_en"], "Ethiopia")
        self.assertEqual(item["supplier"]["business_name"], self.supplier.business_name)

    def test_listing_with_unmatched_attribute_returns_empty_page(self):
        r = self.client.get("/api/products/", {"brew": "siphon"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data, {"products": [], "total": 0})

    def test_bad_filter_value_is_validation_error(self):
        r = self.client.get("/api/products/", {"price_min": "cheap"})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["code"], "VALIDATION")
        self.assertIn("message", r.data)

    def test_product_detail(self):
        r = self.client.get(f"/api/products/{self.product.pk}/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["base_price"], "100.00")

    def test_missing_product_is_404(self):
        self.product.deleted_at = timezone.now()
        self.product.save()
        r = self.client.get(f"/api/products/{self.product.pk}/")
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.data, {"message": "Product not found", "code": "NOT_FOUND"})

    def test_approved_supplier_creates_product_with_nested_rows(self):
        self.client.force_authenticate(self.supplier.user)
        body = {
            "name_en": "Kenya AA",
            "name_ar": "كينيا",
            "base_price": "75.00",
            "stock_quantity": 20,
            "unit": "G",
            "attributes": [{"attribute_key": "roast_level", "attribute_value_en": "light", "attribute_value_ar": "فاتح"}],
            "shipping_zones": [{"zone_name_en": "Riyadh", "zone_name_ar": "الرياض", "shipping_cost": "10.00"}],
            "price_tiers": [
                {"min_quantity": 1, "max_quantity": 9, "price_per_unit": "75.00"},
                {"min_quantity": 10, "max_quantity": None, "price_per_unit": "70.00"},
            ],
        }
        r = self.client.post("/api/products/", body, format="json")
        self.assertEqual(r.status_code, 201, r.data)
        product = Product.objects.get(pk=r.data["id"])
        self.assertEqual(product.supplier, self.supplier)
        self.assertTrue(product.slug.startswith("kenya-aa-"))
        self.assertEqual(product.price_tiers.count(), 2)
        self.assertEqual(product.shipping_zones.count(), 1)
        self.assertEqual(product.attributes.count(), 1)

    def test_update_replaces_supplied_nested_rows_only(self):
        self.client.force_authenticate(self.supplier.user)
        r = self.client.patch(
            f"/api/products/{self.product.pk}/",
            {"stock_quantity": 3, "price_tiers": [{"min_quantity": 2, "max_quantity": None, "price_per_unit": "95.00"}]},
            format="json",
        )
        self.assertEqual(r.status_code, 200, r.data)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 3)
        self.assertEqual([t.min_quantity for t in self.product.price_tiers.all()], [2])
        self.assertEqual(self.product.shipping_zones.count(), 1)

    def test_edit_keeps_stock_sold_since_the_product_was_loaded(self):
        stale = Product.objects.not_deleted().get(pk=self.product.pk)
        place_order(make_user(), [{"productId": self.product.pk, "quantity": 6}])

        serializer = ProductWriteSerializer(stale, data={"name_en": "Renamed"}, partial=True)
        self.assertTrue(serializer.is_valid(), serializer.errors)
        updated = serializer.save()

        self.assertEqual(updated.stock_quantity, 4)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 4)
        self.assertEqual(self.product.name_en, "Renamed")

    def test_explicit_restock_sets_stock(self):
        place_order(make_user(), [{"productId": self.product.pk, "quantity": 6}])
        self.client.force_authenticate(self.supplier.user)
        r = self.client.patch(f"/api/products/{self.product.pk}/", {"stock_quantity": 25}, format="json")
        self.assertEqual(r.status_code, 200, r.data)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 25)

    def test_tier_with_inverted_range_is_rejected(self):
        self.client.force_authenticate(self.supplier.user)
        r = self.client.patch(
            f"/api/products/{self.product.pk}/",
            {"price_tiers": [{"min_quantity": 9, "max_quantity": 5, "price_per_unit": "95.00"}]},
            format="json",
        )
        self.assertEqual(r.status_code, 400)

    def test_pending_supplier_cannot_create(self):
        pending = make_supplier(status=SupplierProfile.Status.PENDING)
        self.client.force_authenticate(pending.user)
        r = self.client.post("/api/products/", {"name_en": "X", "name_ar": "X", "base_price": "1.00"}, format="json")
        self.assertEqual(r.status_code, 403)
        self.assertEqual(r.data["message"], "Supplier not approved")

    def test_buyer_cannot_create(self):
        self.client.force_authenticate(make_user())
        r = self.client.post("/api/products/", {"name_en": "X", "name_ar": "X", "base_price": "1.00"}, format="json")
        self.assertEqual(r.status_code, 403)

    def test_other_supplier_cannot_touch_product(self):
        other = make_supplier()
        self.client.force_authenticate(other.user)
        r = self.client.patch(f"/api/products/{self.product.pk}/", {"stock_quantity": 0}, format="json")
        self.assertEqual(r.status_code, 403)
        r = self.client.patch(f"/api/products/{self.product.pk}/toggle/")
        self.assertEqual(r.status_code, 403)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 10)
        self.assertTrue(self.product.is_active)

    def test_toggle_hides_product_from_catalog(self):
        self.client.force_authenticate(self.supplier.user)
        r = self.client.patch(f"/api/products/{self.product.pk}/toggle/")
        self.assertEqual(r.status_code, 200)
        self.assertFalse(r.data["is_active"])
        self.assertEqual(list_products({}).total, 0)

    def test_soft_delete(self):
        self.client.force_authenticate(self.supplier.user)
        r = self.client.delete(f"/api/products/{self.product.pk}/")
        self.assertEqual(r.status_code, 204)
        self.product.refresh_from_db()
        self.assertIsNotNone(self.product.deleted_at)
        r = self.client.get("/api/supplier/products/")
        self.assertEqual(r.data, [])

    def test_categories_are_sorted(self):
        Category.objects.create(name_en="Tea", name_ar="شاي", slug="tea", sort_order=2)
        Category.objects.create(name_en="Coffee", name_ar="قهوة", slug="coffee", sort_order=1)
        r = self.client.get("/api/categories/")
        self.assertEqual([c["slug"] for c in r.data], ["coffee", "tea"])


@override_settings(MEDIA_ROOT=tempfile.mkdtemp())
class ProductImageTests(TestCase):
    def test_uploaded_image_wins_over_external_url(self):
        product = make_product()
        ProductImage.objects.create(product=product, image=make_image_file(), url="https://cdn.example.com/x.png")
        ProductImage.objects.create(product=product, url="https://cdn.example.com/y.png", sort_order=1)
        r = APIClient().get(f"/api/products/{product.pk}/")
        self.assertEqual(r.status_code, 200)
        srcs = [i["src"] for i in r.data["images"]]
        self.assertTrue(srcs[0].startswith("/media/product_images/"))
        self.assertEqual(srcs[1], "https://cdn.example.com/y.png")
