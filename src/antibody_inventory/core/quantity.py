"""Remaining-quantity arithmetic for a single sample.

Amounts are stored as free text, so every number goes through a lenient parse:
a leading numeric prefix is accepted (``"10 mL"`` -> 10.0) and anything else is
"unknown" (``None``). Unknown values never raise; they degrade per field:

* total amount unknown  -> no computation possible (``valid=False``)
* amount per use unknown -> 0
* uses consumed unknown or negative -> 0
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from typing import Any, NamedTuple

logger = logging.getLogger(__name__)

_NUMBER_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


class Remaining(NamedTuple):
    valid: bool
    remaining: float | None


def parse_number(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int | float):
        return float(value) if math.isfinite(value) else None
    m = _NUMBER_PREFIX.match(str(value))
    if not m:
        return None
    return float(m.group(1))


def parse_count(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, float):
        return max(0, int(value)) if math.isfinite(value) else 0
    m = _INT_PREFIX.match(str(value))
    if not m:
        return 0
    return max(0, int(m.group(1)))


# Sample objects expose snake_case attributes; raw records use the camelCase wire keys.
def _field(sample: Any, attr: str, key: str) -> Any:
    if isinstance(sample, Mapping):
        return sample.get(key, sample.get(attr))
    return getattr(sample, attr, None)


def compute_remaining(sample: Any) -> Remaining:
    total = parse_number(_field(sample, "total_amount", "totalAmount"))
    if total is None:
        logger.debug("total amount unparseable; remaining unknown")
        return Remaining(valid=False, remaining=None)
    per_use = parse_number(_field(sample, "amount_per_use", "amountPerUse"))
    if per_use is None:
        per_use = 0.0
    uses = parse_count(_field(sample, "uses_consumed", "usesConsumed"))
    return Remaining(valid=True, remaining=max(0.0, total - uses * per_use))


def parse_threshold(sample: Any) -> float | None:
    return parse_number(_field(sample, "warn_threshold", "warnThreshold"))
