# orders/models/inventory_unit.py

"""
INVENTORY UNIT

The atomic trackable unit of a shipped product.

Only `shipped` units may be covered by a return authorization.
A unit is "awaiting exchange" while a live (non-cancelled) return item
covering it asks for a replacement SKU.
"""

import uuid
from decimal import Decimal

from django.db import models

from .order import Order


class InventoryUnit(models.Model):
    STATE_ON_HAND = "on_hand"
    STATE_BACKORDERED = "backordered"
    STATE_SHIPPED = "shipped"
    STATE_RETURNED = "returned"

    STATE_CHOICES = [
        (STATE_ON_HAND, "On hand"),
        (STATE_BACKORDERED, "Backordered"),
        (STATE_SHIPPED, "Shipped"),
        (STATE_RETURNED, "Returned"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="inventory_units",
    )

    sku = models.CharField(max_length=64)

    state = models.CharField(
        max_length=32,
        choices=STATE_CHOICES,
        default=STATE_ON_HAND,
    )

    pre_tax_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Price paid for this unit, excluding included tax.",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["order", "state"], name="orders_unit_order_state_idx"),
        ]

    @property
    def is_shipped(self) -> bool:
        return self.state == self.STATE_SHIPPED

    @property
    def exchange_requested(self) -> bool:
        from returns.models.return_item import ReturnItem

        return (
            self.return_items.exclude(exchange_sku="")
            .exclude(reception_status=ReturnItem.RECEPTION_CANCELLED)
            .exists()
        )

    def __str__(self):
        return f"{self.sku} | {self.state}"
