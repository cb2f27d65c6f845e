# returns/models/reimbursement.py

"""
REIMBURSEMENT

Credits or replaces goods for accepted return items.

Two independently failable steps:
1) save_with_items(): validate + persist + attach the return items.
   Validation problems are reported (False + validation_errors), not raised.
2) perform(): settle the reimbursement. Internal failures mark it
   `errored` and are logged; they never propagate to the caller.

Attaching an item makes it `exchange_processed`, which is what keeps the
expedited exchange pipeline from reimbursing the same item twice.
"""

import logging
import uuid
from decimal import Decimal

from django.core.exceptions import NON_FIELD_ERRORS, ValidationError
from django.db import models, transaction
from django.utils import timezone

from orders.models import Order
from returns.services.number_generator import generate_number, number_exists_for

logger = logging.getLogger(__name__)


class Reimbursement(models.Model):
    NUMBER_PREFIX = "RI"

    STATUS_PENDING = "pending"
    STATUS_REIMBURSED = "reimbursed"
    STATUS_ERRORED = "errored"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_REIMBURSED, "Reimbursed"),
        (STATUS_ERRORED, "Errored"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    number = models.CharField(
        max_length=32,
        unique=True,
        blank=True,
        help_text="System-generated reimbursement number (RI + 9 digits)",
    )

    order = models.ForeignKey(
        Order,
        on_delete=models.PROTECT,
        related_name="reimbursements",
    )

    total = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    reimbursement_status = models.CharField(
        max_length=32,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
    )

    performed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    @classmethod
    def build(cls, *, order, return_items):
        reimbursement = cls(order=order)
        reimbursement.pending_return_items = list(return_items)
        return reimbursement

    # --------------------------------------------------
    # VALIDATION + PERSISTENCE
    # --------------------------------------------------

    def clean(self):
        items = getattr(self, "pending_return_items", None) or []
        problems = []

        if not items:
            problems.append("A reimbursement requires at least one return item.")

        for item in items:
            if not item.is_accepted():
                problems.append(f"Return item {item.id} has not been accepted.")
            if item.reimbursement_id is not None:
                problems.append(f"Return item {item.id} has already been reimbursed.")
            if item.reception_status == item.RECEPTION_CANCELLED:
                problems.append(f"Return item {item.id} has been cancelled.")
            if item.inventory_unit.order_id != self.order_id:
                problems.append(
                    f"Return item {item.id} does not belong to order {self.order_id}."
                )

        if problems:
            raise ValidationError({"return_items": problems})

    def save(self, *args, **kwargs):
        if not self.number:
            self.number = generate_number(
                prefix=self.NUMBER_PREFIX,
                exists=number_exists_for(Reimbursement),
            )
        super().save(*args, **kwargs)

    @property
    def validation_errors(self) -> dict:
        return self.__dict__.setdefault("_validation_errors", {})

    def save_with_items(self) -> bool:
        self.validation_errors.clear()

        try:
            self.full_clean()
        except ValidationError as exc:
            if hasattr(exc, "error_dict"):
                self.validation_errors.update(exc.message_dict)
            else:
                self.validation_errors[NON_FIELD_ERRORS] = list(exc.messages)
            return False

        with transaction.atomic():
            self.save()
            for item in self.pending_return_items:
                item.reimbursement = self
                item.save(update_fields=["reimbursement", "updated_at"])

        return True

    # --------------------------------------------------
    # EXECUTION
    # --------------------------------------------------

    def perform(self) -> bool:
        try:
            with transaction.atomic():
                total = self.return_items.aggregate(
                    total=models.Sum("pre_tax_amount")
                ).get("total")
                self.total = Decimal(total or "0.00")
                self.reimbursement_status = self.STATUS_REIMBURSED
                self.performed_at = timezone.now()
                self.save(update_fields=["total", "reimbursement_status", "performed_at"])
        except Exception:
            logger.exception(
                "Reimbursement perform failed",
                extra={"reimbursement": self.number, "order_id": str(self.order_id)},
            )
            self.reimbursement_status = self.STATUS_ERRORED
            self.save(update_fields=["reimbursement_status"])
            return False

        logger.info(
            "Reimbursement performed",
            extra={"reimbursement": self.number, "total": str(self.total)},
        )
        return True

    def __str__(self):
        return f"{self.number} | {self.reimbursement_status}"
