# returns/services/authorization_eligibility.py

"""
RETURN AUTHORIZATION ITEM RULES

Creation checks (independent, both always evaluated):
1) the order exists and has at least one shipped inventory unit
2) none of the covered inventory units is already awaiting an exchange

Items added to an existing authorization are checked separately:
- the unit is not already covered by a live (non-cancelled) return item
- the unit is not already awaiting an exchange

Errors accumulate into a single Django ValidationError keyed by field,
each entry carrying a stable error code.
"""

from __future__ import annotations

from django.core.exceptions import NON_FIELD_ERRORS, ValidationError

from returns.models import ReturnItem

ORDER_MISSING_SHIPPED_UNITS = "order_missing_shipped_units"
ITEMS_ALREADY_AWAITING_EXCHANGE = "items_already_awaiting_exchange"
INVENTORY_UNIT_ALREADY_RETURNED = "inventory_unit_already_returned"


def _check_shipped_units(*, order, errors: dict):
    if order is None or not order.has_shipped_units():
        errors.setdefault("order", []).append(
            ValidationError(
                "Order has no shipped units.",
                code=ORDER_MISSING_SHIPPED_UNITS,
            )
        )


def _check_exchange_conflicts(*, inventory_units, errors: dict):
    if any(unit.exchange_requested for unit in inventory_units):
        errors.setdefault(NON_FIELD_ERRORS, []).append(
            ValidationError(
                "Return items cannot be created for inventory units "
                "that are already awaiting exchange.",
                code=ITEMS_ALREADY_AWAITING_EXCHANGE,
            )
        )


def collect_creation_errors(*, order, inventory_units) -> dict:
    errors: dict = {}
    _check_shipped_units(order=order, errors=errors)
    _check_exchange_conflicts(inventory_units=inventory_units, errors=errors)
    return errors


def validate_new_authorization(*, order, inventory_units):
    errors = collect_creation_errors(order=order, inventory_units=inventory_units)
    if errors:
        raise ValidationError(errors)


def _check_already_returned(*, inventory_units, errors: dict):
    covered = ReturnItem.objects.filter(
        inventory_unit__in=inventory_units
    ).exclude(reception_status=ReturnItem.RECEPTION_CANCELLED)

    if covered.exists():
        errors.setdefault(NON_FIELD_ERRORS, []).append(
            ValidationError(
                "Inventory units are already covered by a return item.",
                code=INVENTORY_UNIT_ALREADY_RETURNED,
            )
        )


def collect_addition_errors(*, inventory_units) -> dict:
    errors: dict = {}
    if not inventory_units:
        return errors
    _check_already_returned(inventory_units=inventory_units, errors=errors)
    _check_exchange_conflicts(inventory_units=inventory_units, errors=errors)
    return errors
