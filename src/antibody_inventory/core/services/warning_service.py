from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from antibody_inventory.core.dtos import QuantityStatusDTO, WarningDTO
from antibody_inventory.core.enums import AmountUnit
from antibody_inventory.core.models import Database, Sample
from antibody_inventory.core.quantity import compute_remaining, parse_threshold


def _unit_label(value: Any) -> str:
    try:
        return AmountUnit.from_any(value).display
    except ValueError:
        return ""


def quantity_status(sample: Sample | Mapping[str, Any]) -> QuantityStatusDTO:
    """Remaining amount, unit and low-stock flag for one sample or unsaved form data."""
    if isinstance(sample, Sample):
        unit = sample.unit_label
    else:
        unit = _unit_label(sample.get("amountUnit", sample.get("amount_unit")))
    result = compute_remaining(sample)
    threshold = parse_threshold(sample)
    low = result.valid and threshold is not None and result.remaining <= threshold
    return QuantityStatusDTO(
        valid=result.valid,
        remaining=result.remaining,
        unit=unit,
        threshold=threshold,
        low=low,
    )


def list_warnings(database: Database) -> list[WarningDTO]:
    """
    Low-stock board: every sample at or under its own threshold, most urgent first.

    Alerting is opt-in per sample; a sample with no parseable threshold is
    never listed however little is left. Ties keep encounter order.
    """
    warnings: list[WarningDTO] = []
    for cid, container, key, sample in database.iter_samples():
        status = quantity_status(sample)
        if not status.low:
            continue
        warnings.append(
            WarningDTO(
                name=sample.name,
                vendor=sample.vendor,
                container_id=cid,
                container_name=container.name,
                position=key,
                remaining=status.remaining,
                unit=status.unit,
                threshold=status.threshold,
            )
        )
    warnings.sort(key=lambda w: w.remaining)
    return warnings
