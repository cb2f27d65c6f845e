# orders/apps.py

"""
ORDERS APP CONFIG

Order-side collaborators consumed by the returns workflow:
- Orders (currency, pre-tax totals, promotions)
- Inventory units (shipped state, per-unit pre-tax amount)
- Stock locations (where returned goods are sent)
"""

from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "orders"
    verbose_name = "Orders"
