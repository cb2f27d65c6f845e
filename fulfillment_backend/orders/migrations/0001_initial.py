"""
======================================================
PATH: orders/migrations/0001_initial.py
======================================================
MIGRATION: CREATE StockLocation, Order, InventoryUnit
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion

import orders.models.order


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="StockLocation",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=255, unique=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Order",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                ("number", models.CharField(max_length=32, unique=True)),
                (
                    "currency",
                    models.CharField(
                        default=orders.models.order._default_currency,
                        max_length=3,
                    ),
                ),
                (
                    "item_total",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0.00"), max_digits=12
                    ),
                ),
                (
                    "pre_tax_item_amount",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Sum of line item amounts excluding included tax.",
                        max_digits=12,
                    ),
                ),
                (
                    "promo_total",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Promotion adjustments (zero or negative).",
                        max_digits=12,
                    ),
                ),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["number"], name="orders_order_number_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="InventoryUnit",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                ("sku", models.CharField(max_length=64)),
                (
                    "state",
                    models.CharField(
                        choices=[
                            ("on_hand", "On hand"),
                            ("backordered", "Backordered"),
                            ("shipped", "Shipped"),
                            ("returned", "Returned"),
                        ],
                        default="on_hand",
                        max_length=32,
                    ),
                ),
                (
                    "pre_tax_amount",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Price paid for this unit, excluding included tax.",
                        max_digits=12,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="inventory_units",
                        to="orders.order",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(
                        fields=["order", "state"], name="orders_unit_order_state_idx"
                    ),
                ],
            },
        ),
    ]
