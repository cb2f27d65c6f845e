# returns/models/return_item.py

"""
RETURN ITEM

One inventory unit covered by a return authorization.

Two independent state tracks:
- reception_status: awaiting -> received | given_to_customer | cancelled
- acceptance_status: pending -> accepted | rejected
  (rejected items may be re-attempted once they become eligible)

Exchange semantics:
- exchange_requested: the customer asked for a replacement SKU
- exchange_processed: a reimbursement already covers this item
- exchange_required:  requested and not yet processed
"""

import uuid
from decimal import Decimal

from django.db import models

from orders.models import InventoryUnit
from returns.services.exceptions import InvalidReturnItemTransitionError

from .customer_return import CustomerReturn
from .reimbursement import Reimbursement
from .return_authorization import ReturnAuthorization


class ReturnItem(models.Model):
    RECEPTION_AWAITING = "awaiting"
    RECEPTION_RECEIVED = "received"
    RECEPTION_GIVEN_TO_CUSTOMER = "given_to_customer"
    RECEPTION_CANCELLED = "cancelled"

    RECEPTION_CHOICES = [
        (RECEPTION_AWAITING, "Awaiting"),
        (RECEPTION_RECEIVED, "Received"),
        (RECEPTION_GIVEN_TO_CUSTOMER, "Given to customer"),
        (RECEPTION_CANCELLED, "Cancelled"),
    ]

    ACCEPTANCE_PENDING = "pending"
    ACCEPTANCE_ACCEPTED = "accepted"
    ACCEPTANCE_REJECTED = "rejected"

    ACCEPTANCE_CHOICES = [
        (ACCEPTANCE_PENDING, "Pending"),
        (ACCEPTANCE_ACCEPTED, "Accepted"),
        (ACCEPTANCE_REJECTED, "Rejected"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    return_authorization = models.ForeignKey(
        ReturnAuthorization,
        on_delete=models.CASCADE,
        related_name="return_items",
    )

    inventory_unit = models.ForeignKey(
        InventoryUnit,
        on_delete=models.PROTECT,
        related_name="return_items",
    )

    customer_return = models.ForeignKey(
        CustomerReturn,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="return_items",
    )

    reimbursement = models.ForeignKey(
        Reimbursement,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="return_items",
    )

    pre_tax_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    exchange_sku = models.CharField(
        max_length=64,
        blank=True,
        default="",
        help_text="Replacement SKU requested by the customer (blank = refund only).",
    )

    reception_status = models.CharField(
        max_length=32,
        choices=RECEPTION_CHOICES,
        default=RECEPTION_AWAITING,
    )

    acceptance_status = models.CharField(
        max_length=32,
        choices=ACCEPTANCE_CHOICES,
        default=ACCEPTANCE_PENDING,
    )

    acceptance_status_errors = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["return_authorization", "reception_status"],
                name="returns_item_ra_reception_idx",
            ),
        ]

    # --------------------------------------------------
    # RECEPTION
    # --------------------------------------------------

    def can_cancel(self) -> bool:
        return self.reception_status == self.RECEPTION_AWAITING

    def cancel(self):
        if not self.can_cancel():
            raise InvalidReturnItemTransitionError(
                f"Return item {self.id} cannot be cancelled from '{self.reception_status}'"
            )
        self.reception_status = self.RECEPTION_CANCELLED
        self.save(update_fields=["reception_status", "updated_at"])

    def receive(self, customer_return: CustomerReturn):
        if self.reception_status != self.RECEPTION_AWAITING:
            raise InvalidReturnItemTransitionError(
                f"Return item {self.id} cannot be received from '{self.reception_status}'"
            )
        self.customer_return = customer_return
        self.reception_status = self.RECEPTION_RECEIVED
        self.save(update_fields=["customer_return", "reception_status", "updated_at"])

    # --------------------------------------------------
    # EXCHANGE
    # --------------------------------------------------

    @property
    def exchange_requested(self) -> bool:
        return bool((self.exchange_sku or "").strip())

    @property
    def exchange_processed(self) -> bool:
        return self.reimbursement_id is not None

    @property
    def exchange_required(self) -> bool:
        return (
            self.exchange_requested
            and not self.exchange_processed
            and self.reception_status != self.RECEPTION_CANCELLED
        )

    # --------------------------------------------------
    # ACCEPTANCE
    # --------------------------------------------------

    def is_accepted(self) -> bool:
        return self.acceptance_status == self.ACCEPTANCE_ACCEPTED

    def attempt_accept(self) -> bool:
        """
        Re-evaluate the eligibility rules: accept the item if it passes,
        otherwise reject it and record why. Returns True when accepted.
        """
        from returns.services.return_item_eligibility import eligibility_failures

        failures = eligibility_failures(self)

        if failures:
            self.acceptance_status = self.ACCEPTANCE_REJECTED
            self.acceptance_status_errors = failures
        else:
            self.acceptance_status = self.ACCEPTANCE_ACCEPTED
            self.acceptance_status_errors = []

        self.save(
            update_fields=["acceptance_status", "acceptance_status_errors", "updated_at"]
        )
        return self.is_accepted()

    def __str__(self):
        return f"{self.inventory_unit_id} | {self.reception_status} | {self.acceptance_status}"
