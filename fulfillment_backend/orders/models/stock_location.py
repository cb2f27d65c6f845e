# orders/models/stock_location.py

"""
STOCK LOCATION

A warehouse / store that can receive returned goods.
Reference data only: the returns workflow reads it, never mutates it.
"""

import uuid

from django.db import models


class StockLocation(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255, unique=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name
