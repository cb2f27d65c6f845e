# returns/services/return_item_eligibility.py

"""
RETURN ITEM ELIGIBILITY RULES

Pure read-only checks used by ReturnItem.attempt_accept().
Each failing rule contributes one error code; an empty list means the
item may be accepted.

Rules:
- item is not cancelled
- inventory unit has shipped
- order completed within RETURN_ELIGIBILITY_DAYS
- item is not already covered by a reimbursement
"""

from __future__ import annotations

from datetime import timedelta

from django.conf import settings
from django.utils import timezone

CANCELLED = "return_item_cancelled"
NOT_SHIPPED = "inventory_unit_not_shipped"
ORDER_NOT_COMPLETED = "order_not_completed"
OUTSIDE_ELIGIBLE_PERIOD = "outside_eligible_time_period"
ALREADY_REIMBURSED = "already_reimbursed"


def _within_eligible_period(order, *, now=None) -> bool:
    days = int(getattr(settings, "RETURN_ELIGIBILITY_DAYS", 365))
    now = now or timezone.now()
    return order.completed_at >= now - timedelta(days=days)


def eligibility_failures(return_item, *, now=None) -> list[str]:
    failures: list[str] = []

    if return_item.reception_status == return_item.RECEPTION_CANCELLED:
        failures.append(CANCELLED)

    unit = return_item.inventory_unit
    if not unit.is_shipped:
        failures.append(NOT_SHIPPED)

    order = unit.order
    if order.completed_at is None:
        failures.append(ORDER_NOT_COMPLETED)
    elif not _within_eligible_period(order, now=now):
        failures.append(OUTSIDE_ELIGIBLE_PERIOD)

    if return_item.reimbursement_id is not None:
        failures.append(ALREADY_REIMBURSED)

    return failures
