# returns/apps.py

"""
RETURNS APP CONFIG

Return authorizations and everything hanging off them:
- Return items (per-unit cancel/accept/exchange state)
- Customer returns (physical receipt)
- Reimbursements (expedited exchanges)
"""

from django.apps import AppConfig


class ReturnsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "returns"
    verbose_name = "Returns"
