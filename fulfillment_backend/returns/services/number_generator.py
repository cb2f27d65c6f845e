# returns/services/number_generator.py

"""
HUMAN-READABLE NUMBER GENERATOR

Produces identifiers like RA123456789 (prefix + 9 random digits).

Guarantees:
- Generate-and-check: candidates already present are skipped.
- Bounded: gives up after NUMBER_GENERATION_MAX_ATTEMPTS and raises
  NumberGenerationExhaustedError instead of looping forever.

The existence check is best-effort. Two concurrent creations can pick the
same free candidate; the unique constraint on `number` is the final
authority and the caller surfaces that as a retryable error.
"""

from __future__ import annotations

import logging
import secrets
import string
from typing import Callable

from django.conf import settings

from returns.services.exceptions import NumberGenerationExhaustedError

logger = logging.getLogger(__name__)

NUMBER_DIGITS = 9
DEFAULT_MAX_ATTEMPTS = 10


def _random_digits(count: int) -> str:
    return "".join(secrets.choice(string.digits) for _ in range(count))


def _max_attempts(value: int | None) -> int:
    if value is None:
        value = getattr(settings, "NUMBER_GENERATION_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS)
    value = int(value)
    if value < 1:
        raise ValueError("max_attempts must be at least 1")
    return value


def number_exists_for(model) -> Callable[[str], bool]:
    """Existence check against `model.number` (persisted identifiers only)."""

    def _exists(candidate: str) -> bool:
        return model.objects.filter(number=candidate).exists()

    return _exists


def generate_number(
    *,
    prefix: str,
    exists: Callable[[str], bool],
    digits: int = NUMBER_DIGITS,
    max_attempts: int | None = None,
) -> str:
    attempts = _max_attempts(max_attempts)

    for attempt in range(1, attempts + 1):
        candidate = f"{prefix}{_random_digits(digits)}"
        if not exists(candidate):
            return candidate

        logger.warning(
            "Generated number already taken, retrying",
            extra={"prefix": prefix, "attempt": attempt},
        )

    raise NumberGenerationExhaustedError(
        f"Could not generate a unique '{prefix}' number after {attempts} attempts."
    )
