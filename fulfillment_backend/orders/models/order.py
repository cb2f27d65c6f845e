# orders/models/order.py

"""
ORDER (READ-ONLY COLLABORATOR)

The returns workflow consumes orders for:
- shipped-unit presence (can anything be returned at all?)
- currency
- refundable amount = pre-tax item amount + promotions

Money fields are snapshots maintained by checkout; nothing in the
returns workflow writes to them.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models


def _default_currency() -> str:
    return getattr(settings, "DEFAULT_CURRENCY", "USD")


class Order(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    number = models.CharField(max_length=32, unique=True)

    currency = models.CharField(max_length=3, default=_default_currency)

    item_total = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    pre_tax_item_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Sum of line item amounts excluding included tax.",
    )

    promo_total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Promotion adjustments (zero or negative).",
    )

    completed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["number"], name="orders_order_number_idx"),
        ]

    def has_shipped_units(self) -> bool:
        from .inventory_unit import InventoryUnit

        return self.inventory_units.filter(state=InventoryUnit.STATE_SHIPPED).exists()

    def __str__(self):
        return f"{self.number} | {self.currency}"
