# returns/services/authorization_service.py

"""
RETURN AUTHORIZATION SERVICE (APPLICATION SERVICE)

Purpose:
- Create / update return authorizations as ONE unit of work.
- Make the post-save pipeline explicit: save aggregate -> run expedited
  exchange orchestration -> commit. Any orchestration failure rolls the
  whole thing back.

Creation flow:
1) normalize requested items (unit must belong to the order, no duplicates)
2) creation rules (shipped units, exchange conflicts) -> ValidationError
3) save authorization (number generated here) + its return items
4) run the orchestrator with the saved authorization
5) commit

Updates run the same save + orchestrate pipeline. Added units must not be
covered by a live return item or already awaiting an exchange.

Number collisions that slip past the generator's existence check are
caught by the unique constraint and surfaced as
AuthorizationNumberCollisionError (the caller may retry).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from orders.models import InventoryUnit
from returns.models import (
    CustomerReturn,
    Reimbursement,
    ReturnAuthorization,
    ReturnItem,
)
from returns.services.authorization_eligibility import (
    collect_addition_errors,
    collect_creation_errors,
)
from returns.services.exceptions import (
    AuthorizationNumberCollisionError,
    InvalidReturnItemTransitionError,
)
from returns.services.expedited_exchange import ExpeditedExchangeOrchestrator

TWOPLACES = Decimal("0.01")


@dataclass(frozen=True)
class AuthorizationSaveResult:
    authorization: ReturnAuthorization
    created: bool
    reimbursement: Reimbursement | None = None


def _money(v) -> Decimal:
    try:
        return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(
            f"Invalid pre_tax_amount: {v}", code="invalid_amount"
        ) from exc


def _normalize_items(*, order, items) -> list[dict]:
    """
    items: list of dicts {inventory_unit_id, pre_tax_amount?, exchange_sku?}
    Returns [{inventory_unit, pre_tax_amount, exchange_sku}, ...]
    """
    if not items:
        return []

    if not isinstance(items, (list, tuple)):
        raise ValidationError("Return items must be a list.", code="invalid_items")

    ids = []
    for line in items:
        if not isinstance(line, dict):
            raise ValidationError("Return items must be objects.", code="invalid_items")

        uid = str(line.get("inventory_unit_id") or "").strip()
        if not uid:
            raise ValidationError(
                "Each return item must include inventory_unit_id.",
                code="invalid_inventory_unit",
            )
        if uid in ids:
            raise ValidationError(
                f"Inventory unit {uid} is listed more than once.",
                code="duplicate_inventory_unit",
            )
        ids.append(uid)

    if order is None:
        return []

    try:
        units = {
            str(u.id): u
            for u in InventoryUnit.objects.select_related("order").filter(
                order=order, id__in=ids
            )
        }
    except ValidationError as exc:
        raise ValidationError(
            "Invalid inventory_unit_id.", code="invalid_inventory_unit"
        ) from exc

    normalized = []
    for line, uid in zip(items, ids):
        unit = units.get(uid)
        if unit is None:
            raise ValidationError(
                f"Inventory unit {uid} does not belong to order {order.number}.",
                code="invalid_inventory_unit",
            )

        amount = line.get("pre_tax_amount")
        normalized.append(
            {
                "inventory_unit": unit,
                "pre_tax_amount": _money(unit.pre_tax_amount if amount is None else amount),
                "exchange_sku": str(line.get("exchange_sku") or "").strip(),
            }
        )

    return normalized


def _create_return_items(*, authorization, normalized_items) -> list[ReturnItem]:
    rows = [
        ReturnItem(
            return_authorization=authorization,
            inventory_unit=line["inventory_unit"],
            pre_tax_amount=line["pre_tax_amount"],
            exchange_sku=line["exchange_sku"],
        )
        for line in normalized_items
    ]
    return list(ReturnItem.objects.bulk_create(rows))


def _is_number_collision(authorization: ReturnAuthorization) -> bool:
    # Called after rollback: a row holding this number belongs to someone else.
    return (
        ReturnAuthorization.objects.filter(number=authorization.number)
        .exclude(pk=authorization.pk)
        .exists()
    )


def _orchestrate(*, authorization, orchestrator) -> Reimbursement | None:
    orchestrator = orchestrator or ExpeditedExchangeOrchestrator.from_settings()
    return orchestrator.run(authorization)


# ============================================================
# COMMANDS
# ============================================================


def create_return_authorization(
    *,
    order,
    stock_location,
    items: list[dict] | None = None,
    memo: str = "",
    reason=None,
    orchestrator: ExpeditedExchangeOrchestrator | None = None,
) -> AuthorizationSaveResult:
    normalized_items = _normalize_items(order=order, items=items)

    errors = collect_creation_errors(
        order=order,
        inventory_units=[line["inventory_unit"] for line in normalized_items],
    )
    if stock_location is None:
        errors.setdefault("stock_location", []).append(
            ValidationError("Stock location is required.", code="missing_stock_location")
        )
    if errors:
        raise ValidationError(errors)

    authorization = ReturnAuthorization(
        order=order,
        stock_location=stock_location,
        memo=(memo or "").strip(),
        reason=reason,
    )

    try:
        with transaction.atomic():
            authorization.save()
            _create_return_items(
                authorization=authorization,
                normalized_items=normalized_items,
            )
            reimbursement = _orchestrate(
                authorization=authorization,
                orchestrator=orchestrator,
            )
    except IntegrityError as exc:
        if _is_number_collision(authorization):
            raise AuthorizationNumberCollisionError(
                f"Return authorization number {authorization.number} is already taken."
            ) from exc
        raise

    return AuthorizationSaveResult(
        authorization=authorization,
        created=True,
        reimbursement=reimbursement,
    )


def save_return_authorization(
    *,
    authorization: ReturnAuthorization,
    orchestrator: ExpeditedExchangeOrchestrator | None = None,
) -> AuthorizationSaveResult:
    """
    Persist an already-created authorization, then run the post-save
    pipeline. Use create_return_authorization() for new records so the
    creation rules apply.
    """
    if authorization._state.adding:
        raise ValueError(
            "Use create_return_authorization() for new return authorizations."
        )

    with transaction.atomic():
        authorization.save()
        reimbursement = _orchestrate(
            authorization=authorization,
            orchestrator=orchestrator,
        )

    return AuthorizationSaveResult(
        authorization=authorization,
        created=False,
        reimbursement=reimbursement,
    )


def update_return_authorization(
    *,
    authorization: ReturnAuthorization,
    memo: str | None = None,
    add_items: list[dict] | None = None,
    remove_item_ids: list | None = None,
    orchestrator: ExpeditedExchangeOrchestrator | None = None,
) -> AuthorizationSaveResult:
    if authorization.is_canceled:
        raise ValidationError(
            "Canceled return authorizations cannot be modified.",
            code="authorization_canceled",
        )

    normalized_items = _normalize_items(order=authorization.order, items=add_items)

    with transaction.atomic():
        if memo is not None:
            authorization.memo = memo.strip()

        if remove_item_ids:
            authorization.return_items.filter(
                id__in=[str(i) for i in remove_item_ids]
            ).delete()

        if normalized_items:
            errors = collect_addition_errors(
                inventory_units=[line["inventory_unit"] for line in normalized_items]
            )
            if errors:
                raise ValidationError(errors)

            _create_return_items(
                authorization=authorization,
                normalized_items=normalized_items,
            )

        result = save_return_authorization(
            authorization=authorization,
            orchestrator=orchestrator,
        )

    return result


@transaction.atomic
def register_customer_return(*, stock_location, return_items) -> CustomerReturn:
    """
    Record the physical receipt of return items at a stock location.
    Every item must still be awaiting reception.
    """
    return_items = list(return_items)
    if not return_items:
        raise ValidationError("A customer return requires return items.", code="no_items")

    for item in return_items:
        if item.reception_status != ReturnItem.RECEPTION_AWAITING:
            raise InvalidReturnItemTransitionError(
                f"Return item {item.id} is not awaiting reception."
            )

    customer_return = CustomerReturn.objects.create(stock_location=stock_location)
    for item in return_items:
        item.receive(customer_return)

    return customer_return
