# orders/tests/test_checkout.py
from decimal import Decimal

from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from common.testing import make_product, make_supplier, make_user
from orders.models import Order, OrderItem
from products.models import Product


class CheckoutApiTests(TestCase):
    def setUp(self):
        self.c = APIClient()
        self.buyer = make_user(email="buyer@example.com")
        r = self.c.post("/api/token/", {"username": "buyer@example.com", "password": "pass1234"}, format="json")
        self.c.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['access']}")
        self.supplier = make_supplier()
        self.p = make_product(self.supplier, base_price="100.00", stock=10, tiers=[(5, 9, "90.00")])

    def checkout(self, items, **body):
        body.setdefault("paymentMethod", "COD")
        return self.c.post("/api/orders/", {"items": items, **body}, format="json")

    def test_cod_checkout_prices_tier_and_decrements_stock(self):
        r = self.checkout([{"productId": str(self.p.id), "quantity": 6}])
        self.assertEqual(r.status_code, 201, r.data)
        self.assertEqual(r.data["status"], "CONFIRMED")
        self.assertEqual(r.data["payment_status"], "PENDING")
        self.assertTrue(r.data["order_number"].startswith("BDO-"))
        self.assertEqual(len(r.data["items"]), 1)

        item = OrderItem.objects.get()
        self.assertEqual(item.unit_price, Decimal("90.00"))
        self.assertEqual(item.subtotal, Decimal("540.00"))
        self.assertEqual(item.supplier, self.supplier)
        self.assertEqual(item.item_status, OrderItem.ItemStatus.PENDING)
        self.p.refresh_from_db()
        self.assertEqual(self.p.stock_quantity, 4)

    def test_online_checkout_waits_for_payment(self):
        r = self.checkout([{"productId": str(self.p.id), "quantity": 1}], paymentMethod="ONLINE")
        self.assertEqual(r.status_code, 201, r.data)
        self.assertEqual(r.data["status"], "PENDING_PAYMENT")

    def test_totals_fee_and_first_shipping_zone(self):
        other = make_product(self.supplier, base_price="33.33", stock=5, zones=["12.50", "99.00"])
        r = self.checkout([
            {"productId": str(self.p.id), "quantity": 2},
            {"productId": str(other.id), "quantity": 3},
        ])
        self.assertEqual(r.status_code, 201, r.data)
        order = Order.objects.get()
        # 2 x 100.00 + 3 x 33.33
        self.assertEqual(order.subtotal, Decimal("299.99"))
        self.assertEqual(order.shipping_total, Decimal("12.50"))
        self.assertEqual(order.total_amount, order.subtotal + order.shipping_total)
        self.assertEqual(order.platform_fee, Decimal("15.00"))
        payouts = sorted(i.supplier_payout for i in order.items.all())
        self.assertEqual(payouts, [Decimal("94.99"), Decimal("190.00")])

    @override_settings(MARKETPLACE={"PLATFORM_FEE_RATE": Decimal("0.10")})
    def test_fee_rate_comes_from_settings(self):
        r = self.checkout([{"productId": str(self.p.id), "quantity": 1}])
        self.assertEqual(r.status_code, 201, r.data)
        self.assertEqual(Order.objects.get().platform_fee, Decimal("10.00"))

    def test_address_and_notes_are_snapshotted(self):
        address = {"fullName": "Sara", "phone": "0501234567", "city": "Riyadh", "street": "King Fahd Rd"}
        r = self.checkout([{"productId": str(self.p.id), "quantity": 1}], address=address, notes="Ring twice")
        self.assertEqual(r.status_code, 201, r.data)
        order = Order.objects.get()
        self.assertEqual(order.address_snapshot["city"], "Riyadh")
        self.assertEqual(order.notes, "Ring twice")

    def test_anonymous_checkout_is_401(self):
        c = APIClient()
        r = c.post("/api/orders/", {"items": [{"productId": str(self.p.id), "quantity": 1}]}, format="json")
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.data["code"], "UNAUTHORIZED")

    def test_empty_items_is_400(self):
        r = self.checkout([])
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["code"], "VALIDATION")

    def test_zero_quantity_is_400(self):
        r = self.checkout([{"productId": str(self.p.id), "quantity": 0}])
        self.assertEqual(r.status_code, 400)
        self.assertEqual(Order.objects.count(), 0)

    def test_insufficient_stock(self):
        r = self.checkout([{"productId": str(self.p.id), "quantity": 11}])
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["code"], "INSUFFICIENT_STOCK")
        self.assertIn(self.p.name_en, r.data["message"])
        self.p.refresh_from_db()
        self.assertEqual(self.p.stock_quantity, 10)

    def test_stock_is_checked_against_all_lines_for_a_product(self):
        r = self.checkout([
            {"productId": str(self.p.id), "quantity": 6},
            {"productId": str(self.p.id), "quantity": 6},
        ])
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["code"], "INSUFFICIENT_STOCK")
        self.assertEqual(Order.objects.count(), 0)

    def test_unknown_product(self):
        r = self.checkout([{"productId": "00000000-0000-0000-0000-000000000000", "quantity": 1}])
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["code"], "PRODUCT_NOT_FOUND")

    def test_inactive_product_cannot_be_ordered(self):
        Product.objects.filter(pk=self.p.pk).update(is_active=False)
        r = self.checkout([{"productId": str(self.p.id), "quantity": 1}])
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["code"], "PRODUCT_NOT_FOUND")


class MyOrdersTests(TestCase):
    def setUp(self):
        self.c = APIClient()
        self.buyer = make_user()
        self.other = make_user()
        self.p = make_product(stock=10)

    def place(self, buyer):
        self.c.force_authenticate(buyer)
        r = self.c.post("/api/orders/", {"items": [{"productId": str(self.p.id), "quantity": 1}]}, format="json")
        self.assertEqual(r.status_code, 201, r.data)
        return r.data["id"]

    def test_buyer_sees_only_own_orders(self):
        mine = self.place(self.buyer)
        self.place(self.other)
        self.c.force_authenticate(self.buyer)
        r = self.c.get("/api/orders/me/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual([o["id"] for o in r.data], [mine])

    def test_other_buyers_order_is_not_found(self):
        theirs = self.place(self.other)
        self.c.force_authenticate(self.buyer)
        r = self.c.get(f"/api/orders/{theirs}/")
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.data, {"message": "Order not found", "code": "NOT_FOUND"})

    def test_order_detail_lists_items(self):
        mine = self.place(self.buyer)
        r = self.c.get(f"/api/orders/{mine}/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["items"][0]["product_name"], self.p.name_en)
