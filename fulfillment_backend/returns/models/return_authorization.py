# returns/models/return_authorization.py

"""
RETURN AUTHORIZATION (AGGREGATE ROOT)

Permission for a customer to send back previously shipped goods.

GUARANTEES:
- `number` is generated once (RA + 9 digits) before first persistence
  and never regenerated.
- Owns its return items (deleting the authorization deletes them).
- Lifecycle: authorized -> canceled (terminal). Transitions go through
  returns.services.authorization_lifecycle only.

Creation invariants (shipped units, exchange conflicts) and the expedited
exchange pipeline are enforced by returns.services.authorization_service,
not by save().
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import NON_FIELD_ERRORS
from django.db import models
from django.db.models import Sum

from orders.models import InventoryUnit, Order, StockLocation
from returns.services.number_generator import generate_number, number_exists_for

from .customer_return import CustomerReturn
from .return_reason import ReturnReason


class ReturnAuthorization(models.Model):
    STATE_AUTHORIZED = "authorized"
    STATE_CANCELED = "canceled"

    STATE_CHOICES = [
        (STATE_AUTHORIZED, "Authorized"),
        (STATE_CANCELED, "Canceled"),
    ]

    NUMBER_PREFIX = "RA"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    number = models.CharField(
        max_length=32,
        unique=True,
        blank=True,
        help_text="System-generated authorization number (RA + 9 digits)",
    )

    state = models.CharField(
        max_length=32,
        choices=STATE_CHOICES,
        default=STATE_AUTHORIZED,
    )

    memo = models.TextField(blank=True, default="")

    order = models.ForeignKey(
        Order,
        on_delete=models.PROTECT,
        related_name="return_authorizations",
    )

    stock_location = models.ForeignKey(
        StockLocation,
        on_delete=models.PROTECT,
        related_name="return_authorizations",
    )

    reason = models.ForeignKey(
        ReturnReason,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="return_authorizations",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["state"], name="returns_ra_state_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self.number:
            self.number = generate_number(
                prefix=self.NUMBER_PREFIX,
                exists=number_exists_for(ReturnAuthorization),
            )
        super().save(*args, **kwargs)

    # --------------------------------------------------
    # ERROR COLLECTION (not persisted)
    # --------------------------------------------------

    @property
    def errors(self) -> dict:
        return self.__dict__.setdefault("_errors", {})

    def add_error(self, field, message):
        key = field or NON_FIELD_ERRORS
        messages = message if isinstance(message, (list, tuple)) else [message]
        self.errors.setdefault(key, []).extend(str(m) for m in messages)

    # --------------------------------------------------
    # READ HELPERS
    # --------------------------------------------------

    @property
    def is_canceled(self) -> bool:
        return self.state == self.STATE_CANCELED

    @property
    def pre_tax_total(self) -> Decimal:
        if self._state.adding:
            return Decimal("0.00")
        total = self.return_items.aggregate(total=Sum("pre_tax_amount")).get("total")
        return Decimal(total or "0.00")

    @property
    def currency(self) -> str:
        if self.order_id is None:
            return settings.DEFAULT_CURRENCY
        return self.order.currency

    @property
    def refundable_amount(self) -> Decimal:
        return Decimal(self.order.pre_tax_item_amount) + Decimal(self.order.promo_total)

    @property
    def inventory_units(self):
        return InventoryUnit.objects.filter(
            return_items__return_authorization=self
        ).distinct()

    @property
    def customer_returns(self):
        return CustomerReturn.objects.filter(
            return_items__return_authorization=self
        ).distinct()

    def has_customer_returned_items(self) -> bool:
        if self._state.adding:
            return False
        return self.customer_returns.exists()

    def can_cancel_return_items(self) -> bool:
        if self._state.adding:
            return True

        from returns.services.authorization_lifecycle import can_cancel_return_items

        return can_cancel_return_items(authorization=self)

    def __str__(self):
        return f"{self.number} | {self.state}"
