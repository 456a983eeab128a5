# orders/tests/test_commit.py
import threading

from django.db import connection
from django.test import TestCase, TransactionTestCase

from common.exceptions import InsufficientStock
from common.testing import make_product, make_user
from orders.assembly import LineRequest, assemble_order
from orders.models import Order, OrderItem
from orders.services import commit_order, place_order
from products.models import Product


class CommitOrderTests(TestCase):
    def setUp(self):
        self.buyer = make_user()
        self.a = make_product(stock=5)
        self.b = make_product(stock=5)

    def test_failure_on_one_line_rolls_back_everything(self):
        draft = assemble_order(
            self.buyer, [LineRequest(self.a.pk, 2), LineRequest(self.b.pk, 3)], Order.PaymentMethod.COD
        )
        self.assertTrue(draft.is_valid)
        # stock drops between pricing and commit
        Product.objects.filter(pk=self.b.pk).update(stock_quantity=1)

        with self.assertRaises(InsufficientStock):
            commit_order(draft)

        self.assertEqual(Order.objects.count(), 0)
        self.assertEqual(OrderItem.objects.count(), 0)
        self.a.refresh_from_db()
        self.b.refresh_from_db()
        self.assertEqual(self.a.stock_quantity, 5)
        self.assertEqual(self.b.stock_quantity, 1)

    def test_second_commit_of_same_draft_is_rejected(self):
        draft = assemble_order(self.buyer, [LineRequest(self.a.pk, 4)], Order.PaymentMethod.COD)
        commit_order(draft)
        draft.order["order_number"] = "BDO-RETRY"
        with self.assertRaises(InsufficientStock):
            commit_order(draft)
        self.a.refresh_from_db()
        self.assertEqual(self.a.stock_quantity, 1)
        self.assertEqual(Order.objects.count(), 1)

    def test_sequential_orders_cannot_oversell(self):
        place_order(self.buyer, [{"productId": self.a.pk, "quantity": 3}])
        with self.assertRaises(InsufficientStock):
            place_order(self.buyer, [{"productId": self.a.pk, "quantity": 3}])
        self.a.refresh_from_db()
        self.assertEqual(self.a.stock_quantity, 2)

    def test_assembly_collects_every_error(self):
        missing = "00000000-0000-0000-0000-000000000000"
        draft = assemble_order(
            self.buyer,
            [LineRequest(missing, 1), LineRequest(self.a.pk, 9), LineRequest(self.b.pk, 1)],
            Order.PaymentMethod.COD,
        )
        self.assertFalse(draft.is_valid)
        self.assertEqual([e.default_code for e in draft.errors], ["product_not_found", "insufficient_stock"])
        self.assertEqual(len(draft.items), 1)

    def test_assembly_checks_stock_against_all_lines_for_a_product(self):
        draft = assemble_order(
            self.buyer, [LineRequest(self.a.pk, 3), LineRequest(self.a.pk, 3)], Order.PaymentMethod.COD
        )
        self.assertFalse(draft.is_valid)
        self.assertEqual([e.default_code for e in draft.errors], ["insufficient_stock"])
        self.assertEqual(len(draft.items), 1)
        self.assertEqual(draft.stock_decrements[self.a.pk], 3)

    def test_order_numbers_are_unique(self):
        numbers = {place_order(self.buyer, [{"productId": self.a.pk, "quantity": 1}]).order_number for _ in range(5)}
        self.assertEqual(len(numbers), 5)


class ConcurrentCheckoutTests(TransactionTestCase):
    def setUp(self):
        self.product = make_product(stock=10)
        self.buyers = [make_user(), make_user()]

    def test_only_one_of_two_racing_orders_wins(self):
        barrier = threading.Barrier(2)
        placed, rejected, unexpected = [], [], []

        def buy(buyer):
            try:
                barrier.wait()
                placed.append(place_order(buyer, [{"productId": self.product.pk, "quantity": 6}]))
            except InsufficientStock as exc:
                rejected.append(exc)
            except Exception as exc:
                unexpected.append(exc)
            finally:
                connection.close()

        threads = [threading.Thread(target=buy, args=(b,)) for b in self.buyers]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(unexpected, [])
        self.assertEqual(len(placed), 1)
        self.assertEqual(len(rejected), 1)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 4)
        self.assertEqual(Order.objects.count(), 1)
        self.assertEqual(OrderItem.objects.count(), 1)
