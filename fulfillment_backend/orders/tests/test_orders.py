# orders/tests/test_orders.py

from decimal import Decimal

from django.test import TestCase, override_settings

from orders.models import InventoryUnit, Order


class OrderTests(TestCase):
    def setUp(self):
        self.order = Order.objects.create(number="R1", currency="USD")

    def test_no_units_means_nothing_shipped(self):
        self.assertFalse(self.order.has_shipped_units())

    def test_unshipped_units_do_not_count(self):
        InventoryUnit.objects.create(order=self.order, sku="A", state=InventoryUnit.STATE_ON_HAND)
        InventoryUnit.objects.create(order=self.order, sku="B", state=InventoryUnit.STATE_BACKORDERED)

        self.assertFalse(self.order.has_shipped_units())

    def test_shipped_unit_counts(self):
        InventoryUnit.objects.create(
            order=self.order,
            sku="A",
            state=InventoryUnit.STATE_SHIPPED,
            pre_tax_amount=Decimal("9.99"),
        )

        self.assertTrue(self.order.has_shipped_units())

    @override_settings(DEFAULT_CURRENCY="EUR")
    def test_currency_defaults_from_settings(self):
        order = Order.objects.create(number="R2")

        self.assertEqual(order.currency, "EUR")

    def test_unit_without_return_items_has_no_exchange(self):
        unit = InventoryUnit.objects.create(order=self.order, sku="A")

        self.assertFalse(unit.exchange_requested)
