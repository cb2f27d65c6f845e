# returns/services/authorization_lifecycle.py

"""
RETURN AUTHORIZATION LIFECYCLE

The ONLY allowed lifecycle transitions for ReturnAuthorization.

States:
- authorized (initial)
- canceled   (terminal)

Event `cancel` (authorized -> canceled) is guarded: every return item must
be individually cancelable, or there must be no items at all. A rejected
cancel changes nothing and reports False to the caller.
"""

from __future__ import annotations

import logging

from django.db import transaction

from returns.models import ReturnAuthorization
from returns.services.exceptions import TransitionRejectedError

logger = logging.getLogger(__name__)

# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    ReturnAuthorization.STATE_CANCELED,
}

ALLOWED_TRANSITIONS = {
    ReturnAuthorization.STATE_AUTHORIZED: {
        ReturnAuthorization.STATE_CANCELED,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_state: str, to_state: str) -> bool:
    if from_state in TERMINAL_STATES:
        return False

    return to_state in ALLOWED_TRANSITIONS.get(from_state, set())


def can_cancel_return_items(*, authorization: ReturnAuthorization) -> bool:
    return all(item.can_cancel() for item in authorization.return_items.all())


def validate_transition(*, authorization: ReturnAuthorization, target_state: str):
    if not can_transition(from_state=authorization.state, to_state=target_state):
        raise TransitionRejectedError(
            f"Return authorization {authorization.number} cannot transition from "
            f"'{authorization.state}' to '{target_state}'"
        )

    if target_state == ReturnAuthorization.STATE_CANCELED and not can_cancel_return_items(
        authorization=authorization
    ):
        raise TransitionRejectedError(
            f"Return authorization {authorization.number} has return items "
            "that can no longer be canceled"
        )


# ============================================================
# EVENTS
# ============================================================


def cancel_return_authorization(*, authorization: ReturnAuthorization) -> bool:
    try:
        validate_transition(
            authorization=authorization,
            target_state=ReturnAuthorization.STATE_CANCELED,
        )
    except TransitionRejectedError as exc:
        logger.info(
            "Return authorization cancel rejected",
            extra={"number": authorization.number, "reason": str(exc)},
        )
        return False

    with transaction.atomic():
        for item in authorization.return_items.all():
            if item.can_cancel():
                item.cancel()

        authorization.state = ReturnAuthorization.STATE_CANCELED
        authorization.save(update_fields=["state", "updated_at"])

    logger.info(
        "Return authorization canceled",
        extra={"number": authorization.number},
    )
    return True
