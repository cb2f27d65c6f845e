"""
======================================================
PATH: returns/migrations/0001_initial.py
======================================================
MIGRATION: CREATE ReturnReason, CustomerReturn, Reimbursement,
ReturnAuthorization, ReturnItem
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion


def _uuid_pk():
    return (
        "id",
        models.UUIDField(
            primary_key=True,
            default=uuid.uuid4,
            editable=False,
            serialize=False,
        ),
    )


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ReturnReason",
            fields=[
                _uuid_pk(),
                ("name", models.CharField(max_length=255, unique=True)),
                ("is_active", models.BooleanField(default=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="CustomerReturn",
            fields=[
                _uuid_pk(),
                (
                    "number",
                    models.CharField(
                        blank=True,
                        help_text="System-generated customer return number",
                        max_length=32,
                        unique=True,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "stock_location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="customer_returns",
                        to="orders.stocklocation",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Reimbursement",
            fields=[
                _uuid_pk(),
                (
                    "number",
                    models.CharField(
                        blank=True,
                        help_text="System-generated reimbursement number (RI + 9 digits)",
                        max_length=32,
                        unique=True,
                    ),
                ),
                (
                    "total",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0.00"), max_digits=12
                    ),
                ),
                (
                    "reimbursement_status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("reimbursed", "Reimbursed"),
                            ("errored", "Errored"),
                        ],
                        default="pending",
                        max_length=32,
                    ),
                ),
                ("performed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reimbursements",
                        to="orders.order",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="ReturnAuthorization",
            fields=[
                _uuid_pk(),
                (
                    "number",
                    models.CharField(
                        blank=True,
                        help_text="System-generated authorization number (RA + 9 digits)",
                        max_length=32,
                        unique=True,
                    ),
                ),
                (
                    "state",
                    models.CharField(
                        choices=[
                            ("authorized", "Authorized"),
                            ("canceled", "Canceled"),
                        ],
                        default="authorized",
                        max_length=32,
                    ),
                ),
                ("memo", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="return_authorizations",
                        to="orders.order",
                    ),
                ),
                (
                    "stock_location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="return_authorizations",
                        to="orders.stocklocation",
                    ),
                ),
                (
                    "reason",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="return_authorizations",
                        to="returns.returnreason",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["state"], name="returns_ra_state_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ReturnItem",
            fields=[
                _uuid_pk(),
                (
                    "pre_tax_amount",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0.00"), max_digits=12
                    ),
                ),
                (
                    "exchange_sku",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Replacement SKU requested by the customer (blank = refund only).",
                        max_length=64,
                    ),
                ),
                (
                    "reception_status",
                    models.CharField(
                        choices=[
                            ("awaiting", "Awaiting"),
                            ("received", "Received"),
                            ("given_to_customer", "Given to customer"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="awaiting",
                        max_length=32,
                    ),
                ),
                (
                    "acceptance_status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("accepted", "Accepted"),
                            ("rejected", "Rejected"),
                        ],
                        default="pending",
                        max_length=32,
                    ),
                ),
                (
                    "acceptance_status_errors",
                    models.JSONField(blank=True, default=list),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "return_authorization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="return_items",
                        to="returns.returnauthorization",
                    ),
                ),
                (
                    "inventory_unit",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="return_items",
                        to="orders.inventoryunit",
                    ),
                ),
                (
                    "customer_return",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="return_items",
                        to="returns.customerreturn",
                    ),
                ),
                (
                    "reimbursement",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="return_items",
                        to="returns.reimbursement",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["return_authorization", "reception_status"],
                        name="returns_item_ra_reception_idx",
                    ),
                ],
            },
        ),
    ]
