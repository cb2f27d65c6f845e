# returns/services/exchange_hooks.py

"""
PRE-EXCHANGE HOOKS

Extension points invoked by the expedited exchange pipeline right before
a reimbursement is created. A hook is anything callable with the list of
accepted return items; its return value is ignored.

Hooks are passed to ExpeditedExchangeOrchestrator explicitly. The default
orchestrator loads dotted paths from settings.PRE_EXPEDITED_EXCHANGE_HOOKS.
"""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from django.conf import settings
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)


class PreExchangeHook(Protocol):
    def __call__(self, return_items: list) -> None: ...


class LogExchangeItemsHook:
    """Records which items are about to be exchanged."""

    def __init__(self, level: int = logging.INFO):
        self.level = level

    def __call__(self, return_items: list) -> None:
        logger.log(
            self.level,
            "Expedited exchange about to be reimbursed",
            extra={
                "return_item_ids": [str(item.id) for item in return_items],
                "exchange_skus": [item.exchange_sku for item in return_items],
            },
        )


def load_configured_hooks(paths: Sequence[str] | None = None) -> tuple:
    if paths is None:
        paths = getattr(settings, "PRE_EXPEDITED_EXCHANGE_HOOKS", ())

    hooks = []
    for path in paths:
        hook = import_string(path)
        # Classes are instantiated with no arguments; functions are used as-is.
        hooks.append(hook() if isinstance(hook, type) else hook)
    return tuple(hooks)
