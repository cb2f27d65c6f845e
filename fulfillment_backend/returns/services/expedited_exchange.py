# returns/services/expedited_exchange.py

"""
EXPEDITED EXCHANGE ORCHESTRATOR (APPLICATION SERVICE)

Purpose:
- After every successful save of a return authorization, issue the
  exchange reimbursement immediately instead of waiting for the goods
  to come back.

Flow (only when enabled and the authorization is not canceled):
1) select items whose exchange is required (requested, not yet processed,
   not cancelled)
2) attempt to accept each one (failures are logged and swallowed)
3) keep only the items that ended up accepted
4) nothing accepted -> stop, no reimbursement
5) run pre-exchange hooks in order with the accepted items
6) build + save the reimbursement
   - saved  -> perform it (exactly once)
   - failed -> copy its errors onto the authorization and raise
               ReimbursementCreationFailed (aborts the enclosing save)

Idempotence:
- Saved reimbursements attach to their items, which makes those items
  exchange_processed. Re-running finds nothing left to exchange.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from django.conf import settings
from django.core.exceptions import NON_FIELD_ERRORS
from django.db import transaction

from returns.models import Reimbursement, ReturnAuthorization
from returns.services.exceptions import ReimbursementCreationFailed
from returns.services.exchange_hooks import PreExchangeHook, load_configured_hooks

logger = logging.getLogger(__name__)


class ExpeditedExchangeOrchestrator:
    def __init__(
        self,
        *,
        enabled: bool | None = None,
        hooks: Sequence[PreExchangeHook] = (),
        reimbursement_factory: Callable[..., Reimbursement] = Reimbursement.build,
    ):
        if enabled is None:
            enabled = bool(getattr(settings, "EXPEDITED_EXCHANGES_ENABLED", False))

        self.enabled = enabled
        self.hooks = tuple(hooks)
        self.reimbursement_factory = reimbursement_factory

    @classmethod
    def from_settings(cls) -> "ExpeditedExchangeOrchestrator":
        return cls(hooks=load_configured_hooks())

    # --------------------------------------------------
    # STEPS
    # --------------------------------------------------

    def _attempt_accept(self, items):
        for item in items:
            try:
                with transaction.atomic():
                    item.attempt_accept()
            except Exception:
                # TODO: confirm with ops whether accept failures should block the save.
                logger.exception(
                    "Return item accept attempt failed",
                    extra={"return_item_id": str(item.id)},
                )
                # In-memory status may be ahead of the rolled-back row.
                item.refresh_from_db(fields=["acceptance_status", "acceptance_status_errors"])

    def _run_hooks(self, items):
        for hook in self.hooks:
            hook(items)

    # --------------------------------------------------
    # ENTRYPOINT
    # --------------------------------------------------

    def run(self, authorization: ReturnAuthorization) -> Reimbursement | None:
        if not self.enabled:
            return None

        if authorization.is_canceled:
            return None

        items_to_exchange = [
            item for item in authorization.return_items.all() if item.exchange_required
        ]
        if not items_to_exchange:
            return None

        self._attempt_accept(items_to_exchange)

        accepted = [item for item in items_to_exchange if item.is_accepted()]
        if not accepted:
            logger.info(
                "No exchange items accepted; skipping reimbursement",
                extra={"number": authorization.number},
            )
            return None

        self._run_hooks(accepted)

        reimbursement = self.reimbursement_factory(
            order=authorization.order,
            return_items=accepted,
        )

        if not reimbursement.save_with_items():
            errors = dict(reimbursement.validation_errors)
            for field, messages in errors.items():
                authorization.add_error(
                    None,
                    [m if field == NON_FIELD_ERRORS else f"{field}: {m}" for m in messages],
                )

            logger.error(
                "Expedited exchange reimbursement failed validation",
                extra={"number": authorization.number, "errors": errors},
            )
            raise ReimbursementCreationFailed(
                f"Reimbursement for return authorization {authorization.number} "
                "could not be saved.",
                authorization=authorization,
                errors=errors,
            )

        reimbursement.perform()

        logger.info(
            "Expedited exchange reimbursed",
            extra={
                "number": authorization.number,
                "reimbursement": reimbursement.number,
                "return_item_ids": [str(item.id) for item in accepted],
            },
        )
        return reimbursement
