# returns/tests/helpers.py

from __future__ import annotations

import itertools
from datetime import timedelta
from decimal import Decimal

from django.utils import timezone

from orders.models import InventoryUnit, Order, StockLocation

_order_numbers = itertools.count(1000)


def make_stock_location(name="Main Warehouse") -> StockLocation:
    location, _ = StockLocation.objects.get_or_create(name=name)
    return location


def make_order(
    *,
    shipped=1,
    on_hand=0,
    unit_price="25.00",
    currency="USD",
    completed_days_ago=1,
    pre_tax_item_amount="100.00",
    promo_total="0.00",
):
    """
    Create an order with `shipped` shipped units and `on_hand` unshipped units.
    Returns (order, [units...]) with shipped units first.
    """
    completed_at = None
    if completed_days_ago is not None:
        completed_at = timezone.now() - timedelta(days=completed_days_ago)

    order = Order.objects.create(
        number=f"R{next(_order_numbers)}",
        currency=currency,
        pre_tax_item_amount=Decimal(pre_tax_item_amount),
        promo_total=Decimal(promo_total),
        completed_at=completed_at,
    )

    units = []
    for idx in range(shipped):
        units.append(
            InventoryUnit.objects.create(
                order=order,
                sku=f"SKU-{idx}",
                state=InventoryUnit.STATE_SHIPPED,
                pre_tax_amount=Decimal(unit_price),
            )
        )
    for idx in range(on_hand):
        units.append(
            InventoryUnit.objects.create(
                order=order,
                sku=f"SKU-OH-{idx}",
                state=InventoryUnit.STATE_ON_HAND,
                pre_tax_amount=Decimal(unit_price),
            )
        )

    return order, units


def item_line(unit, *, exchange_sku="", pre_tax_amount=None) -> dict:
    line = {"inventory_unit_id": str(unit.id), "exchange_sku": exchange_sku}
    if pre_tax_amount is not None:
        line["pre_tax_amount"] = pre_tax_amount
    return line
