# orders/tests/test_fulfillment.py
from decimal import Decimal

from django.test import SimpleTestCase, TestCase
from rest_framework.test import APIClient

from common.testing import make_product, make_supplier, make_user
from orders.models import Order, OrderItem
from orders.services import place_order


class OrderTransitionTests(SimpleTestCase):
    def test_order_lifecycle(self):
        order = Order(status=Order.Status.PENDING_PAYMENT)
        self.assertTrue(order.can_transition_to(Order.Status.CONFIRMED))
        self.assertTrue(order.can_transition_to(Order.Status.CANCELLED))
        self.assertFalse(order.can_transition_to(Order.Status.SHIPPED))

        order.status = Order.Status.DELIVERED
        self.assertTrue(order.can_transition_to(Order.Status.REFUNDED))
        self.assertFalse(order.can_transition_to(Order.Status.CANCELLED))

        order.status = Order.Status.REFUNDED
        for target in Order.Status.values:
            self.assertFalse(order.can_transition_to(target))

    def test_items_only_move_forward(self):
        item = OrderItem(item_status=OrderItem.ItemStatus.PROCESSING)
        self.assertTrue(item.can_advance_to("SHIPPED"))
        self.assertTrue(item.can_advance_to("DELIVERED"))
        self.assertFalse(item.can_advance_to("PENDING"))
        self.assertFalse(item.can_advance_to("PROCESSING"))
        self.assertFalse(item.can_advance_to("LOST"))


class SupplierFulfillmentTests(TestCase):
    def setUp(self):
        self.c = APIClient()
        self.supplier = make_supplier()
        self.buyer = make_user()
        product = make_product(self.supplier, base_price="100.00", stock=10)
        self.order = place_order(self.buyer, [{"productId": product.pk, "quantity": 2}])
        self.item = self.order.items.get()
        self.c.force_authenticate(self.supplier.user)

    def update(self, item_id, **body):
        return self.c.patch(f"/api/supplier/order-items/{item_id}/", body, format="json")

    def test_supplier_lists_own_items_with_order_context(self):
        r = self.c.get("/api/supplier/orders/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(len(r.data), 1)
        self.assertEqual(r.data[0]["order_number"], self.order.order_number)

    def test_advance_with_tracking_number(self):
        r = self.update(self.item.pk, itemStatus="SHIPPED", trackingNumber="SMSA-123")
        self.assertEqual(r.status_code, 200, r.data)
        self.item.refresh_from_db()
        self.assertEqual(self.item.item_status, "SHIPPED")
        self.assertEqual(self.item.tracking_number, "SMSA-123")
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.Status.CONFIRMED)

    def test_same_status_can_add_tracking_number(self):
        self.update(self.item.pk, itemStatus="SHIPPED")
        r = self.update(self.item.pk, itemStatus="SHIPPED", trackingNumber="ARAMEX-9")
        self.assertEqual(r.status_code, 200, r.data)
        self.item.refresh_from_db()
        self.assertEqual(self.item.tracking_number, "ARAMEX-9")

    def test_moving_backwards_is_rejected(self):
        self.update(self.item.pk, itemStatus="DELIVERED")
        r = self.update(self.item.pk, itemStatus="PROCESSING")
        self.assertEqual(r.status_code, 400)
        self.item.refresh_from_db()
        self.assertEqual(self.item.item_status, "DELIVERED")

    def test_unknown_status_is_rejected(self):
        r = self.update(self.item.pk, itemStatus="LOST")
        self.assertEqual(r.status_code, 400)

    def test_other_suppliers_item_is_not_found(self):
        other = make_supplier()
        self.c.force_authenticate(other.user)
        r = self.update(self.item.pk, itemStatus="PROCESSING")
        self.assertEqual(r.status_code, 404)
        self.item.refresh_from_db()
        self.assertEqual(self.item.item_status, "PENDING")

    def test_buyer_cannot_update_items(self):
        self.c.force_authenticate(self.buyer)
        r = self.update(self.item.pk, itemStatus="PROCESSING")
        self.assertEqual(r.status_code, 403)

    def test_dashboard_and_finances(self):
        r = self.c.get("/api/supplier/dashboard/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["total_sales"], Decimal("200.00"))
        self.assertEqual(r.data["pending_orders"], 1)
        self.assertEqual(r.data["active_products"], 1)

        r = self.c.get("/api/supplier/finances/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["total_earned"], Decimal("200.00"))
        self.assertEqual(r.data["net_payout"], Decimal("190.00"))
        self.assertEqual(r.data["platform_fees"], Decimal("10.00"))


class AdminBackOfficeTests(TestCase):
    def setUp(self):
        self.c = APIClient()
        self.admin = make_user(role="ADMIN")
        supplier = make_supplier()
        make_supplier(status="PENDING")
        product = make_product(supplier, base_price="50.00", stock=10, zones=["5.00"])
        place_order(make_user(), [{"productId": product.pk, "quantity": 2}])

    def test_dashboard(self):
        self.c.force_authenticate(self.admin)
        r = self.c.get("/api/admin/dashboard/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["total_orders"], 1)
        self.assertEqual(r.data["today_orders"], 1)
        self.assertEqual(r.data["total_revenue"], Decimal("105.00"))
        self.assertEqual(r.data["platform_fees"], Decimal("5.00"))
        self.assertEqual(r.data["active_suppliers"], 1)
        self.assertEqual(r.data["pending_approvals"], 1)

    def test_finances_break_down_per_supplier(self):
        self.c.force_authenticate(self.admin)
        r = self.c.get("/api/admin/finances/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["supplier_payouts"], Decimal("100.00"))
        self.assertEqual(len(r.data["suppliers"]), 1)
        self.assertEqual(r.data["suppliers"][0]["payout"], Decimal("95.00"))

    def test_all_orders_for_admin_only(self):
        self.c.force_authenticate(self.admin)
        self.assertEqual(len(self.c.get("/api/admin/orders/").data), 1)
        self.c.force_authenticate(make_user())
        self.assertEqual(self.c.get("/api/admin/orders/").status_code, 403)
