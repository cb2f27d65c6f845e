# returns/models/return_reason.py

import uuid

from django.db import models


class ReturnReason(models.Model):
    """Why the customer is sending goods back (reference data)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255, unique=True)

    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name
