from __future__ import annotations

import logging
from typing import Protocol

from antibody_inventory.core.enums import AmountUnit, DropdownField

logger = logging.getLogger(__name__)

UNCONJUGATED = "Unconjugated (secondary required)"

DEFAULT_OPTIONS: dict[DropdownField, tuple[str, ...]] = {
    DropdownField.VENDOR: (
        "Abcam",
        "Cell Signaling Technology (CST)",
        "Proteintech",
        "Santa Cruz",
        "Thermo Fisher",
        "Sigma-Aldrich",
        "BD Biosciences",
        "BioLegend",
        "Jackson ImmunoResearch",
    ),
    DropdownField.CONCENTRATION: (
        "0.05 mg/mL",
        "0.1 mg/mL",
        "0.2 mg/mL",
        "0.5 mg/mL",
        "1 mg/mL",
        "2 mg/mL",
        "5 mg/mL",
        "Unknown",
    ),
    DropdownField.STORAGE: ("4°C", "-20°C", "-80°C", "Room temperature", "Protect from light"),
    DropdownField.HOST: ("Mouse", "Rabbit", "Rat", "Goat", "Sheep", "Chicken", "Human"),
    DropdownField.ISOTYPE: (
        "IgG", "IgG1", "IgG2a", "IgG2b", "IgM", "IgA", "IgE", "IgY", "Unknown",
    ),
    DropdownField.CONJUGATE: (
        UNCONJUGATED,
        "HRP",
        "AP",
        "Biotin",
        "FITC",
        "PE",
        "APC",
        "Alexa Fluor 488",
        "Alexa Fluor 555",
        "Alexa Fluor 594",
        "Alexa Fluor 647",
    ),
}

AMOUNT_UNIT_OPTIONS = tuple(u.value for u in AmountUnit)


def is_conjugated(value: str | None) -> bool:
    return bool(value and value.strip()) and value.strip() != UNCONJUGATED


class OptionsStore(Protocol):
    def load(self) -> dict[str, list[str]]: ...
    def save(self, options: dict[str, list[str]]) -> None: ...


class OptionsService:
    """
    User-contributed dropdown values layered over the built-in defaults.

    Custom values are kept most-recent-first and capped per field.
    """

    def __init__(self, store: OptionsStore, cap: int = 50) -> None:
        self._store = store
        self._cap = cap

    def custom(self, field: DropdownField | str) -> list[str]:
        field = DropdownField.from_any(field)
        return list(self._store.load().get(field.value, []))

    def choices(self, field: DropdownField | str) -> list[str]:
        field = DropdownField.from_any(field)
        merged = [*self.custom(field), *DEFAULT_OPTIONS[field]]
        return list(dict.fromkeys(merged))

    def remember(self, field: DropdownField | str, value: str) -> list[str]:
        field = DropdownField.from_any(field)
        value = (value or "").strip()
        options = self._store.load()
        current = options.get(field.value, [])
        if not value:
            return current
        updated = [value, *(v for v in current if v != value)][: self._cap]
        options[field.value] = updated
        self._store.save(options)
        logger.debug("remembered %s option %r", field.value, value)
        return updated
