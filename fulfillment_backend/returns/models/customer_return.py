# returns/models/customer_return.py

"""
CUSTOMER RETURN

Physical receipt of returned goods at a stock location.
Return items point at the customer return that received them.
"""

import uuid

from django.db import models

from orders.models import StockLocation
from returns.services.number_generator import generate_number, number_exists_for


class CustomerReturn(models.Model):
    NUMBER_PREFIX = "CR"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    number = models.CharField(
        max_length=32,
        unique=True,
        blank=True,
        help_text="System-generated customer return number",
    )

    stock_location = models.ForeignKey(
        StockLocation,
        on_delete=models.PROTECT,
        related_name="customer_returns",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def save(self, *args, **kwargs):
        if not self.number:
            self.number = generate_number(
                prefix=self.NUMBER_PREFIX,
                exists=number_exists_for(CustomerReturn),
            )
        super().save(*args, **kwargs)

    def __str__(self):
        return self.number
