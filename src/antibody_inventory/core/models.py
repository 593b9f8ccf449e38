"""Persisted shape of the inventory.

Database -> Container (keyed by opaque id) -> slots (keyed by "<row>-<col>") -> Sample.
Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

import logging
import re
from typing import Any, NamedTuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PositiveInt,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from antibody_inventory.core.enums import AmountUnit
from antibody_inventory.core.quantity import parse_count

logger = logging.getLogger(__name__)

_POSITION_KEY = re.compile(r"(\d+)-(\d+)")


class ModelBase(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
        alias_generator=to_camel,
        str_strip_whitespace=True,
    )


class Position(NamedTuple):
    row: int
    col: int

    @property
    def key(self) -> str:
        return f"{self.row}-{self.col}"

    @classmethod
    def parse(cls, value) -> Position:
        if isinstance(value, Position):
            return value
        if isinstance(value, tuple) and len(value) == 2:
            row, col = value
            if type(row) is int and type(col) is int:
                return cls(row, col)
        if isinstance(value, str):
            m = _POSITION_KEY.fullmatch(value.strip())
            if m:
                return cls(int(m.group(1)), int(m.group(2)))
        raise ValueError(f"Cannot parse {value!r} into {cls.__name__}")

    def __str__(self) -> str:
        return self.key


SAMPLE_TEXT_FIELDS = (
    "name",
    "clone_id",
    "vendor",
    "catalog_number",
    "lot_number",
    "concentration",
    "molecular_weight",
    "host_species",
    "isotype",
    "conjugate",
    "storage_condition",
    "expiry_date",
    "total_amount",
    "amount_per_use",
    "warn_threshold",
    "remark",
)


class Sample(ModelBase):
    """One antibody aliquot. Replaced wholesale on every write."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str
    clone_id: str = ""
    vendor: str = ""
    catalog_number: str = ""
    lot_number: str = ""
    concentration: str = ""
    molecular_weight: str = ""
    host_species: str = ""
    isotype: str = ""
    conjugate: str = ""
    storage_condition: str = ""
    expiry_date: str = ""
    total_amount: str = ""
    amount_unit: AmountUnit | None = None
    amount_per_use: str = ""
    uses_consumed: int = 0
    warn_threshold: str = ""
    remark: str = ""

    @field_validator(*SAMPLE_TEXT_FIELDS, mode="before")
    @classmethod
    def _none_as_blank(cls, v):
        return "" if v is None else v

    @field_validator("uses_consumed", mode="before")
    @classmethod
    def _lenient_count(cls, v):
        return parse_count(v)

    @field_validator("amount_unit", mode="before")
    @classmethod
    def _lenient_unit(cls, v: Any):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        try:
            return AmountUnit.from_any(v)
        except ValueError:
            logger.debug("unrecognised amount unit %r; treating as Unknown", v)
            return AmountUnit.UNKNOWN

    @field_serializer("amount_unit")
    def _unit_as_text(self, unit: AmountUnit | None) -> str:
        return unit.value if unit else ""

    @property
    def occupied(self) -> bool:
        return bool(self.name and self.name.strip())

    @property
    def unit_label(self) -> str:
        return self.amount_unit.display if self.amount_unit else ""

    def with_uses(self, uses: int) -> Sample:
        return self.model_copy(update={"uses_consumed": max(0, uses)})


class Container(ModelBase):
    name: str = Field(min_length=1)
    rows: PositiveInt
    cols: PositiveInt
    slots: dict[str, Sample] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _slots_inside_grid(self):
        for key, sample in self.slots.items():
            pos = Position.parse(key)
            if not self.contains(pos):
                raise ValueError(f"slot {key} lies outside a {self.rows}x{self.cols} grid")
            if pos.key != key:
                raise ValueError(f"slot key {key!r} is not canonical (expected {pos.key!r})")
            if not sample.occupied:
                raise ValueError(f"slot {key} holds a sample without a name")
        return self

    def contains(self, pos: Position) -> bool:
        return 1 <= pos.row <= self.rows and 1 <= pos.col <= self.cols

    def positions(self):
        """All grid positions, row-major."""
        for r in range(1, self.rows + 1):
            for c in range(1, self.cols + 1):
                yield Position(r, c)

    def occupied_slots(self):
        for key, sample in self.slots.items():
            if sample.occupied:
                yield key, sample


class Database(ModelBase):
    containers: dict[str, Container] = Field(default_factory=dict)

    def iter_samples(self):
        """Yield (container_id, container, position key, sample) in insertion order."""
        for cid, container in self.containers.items():
            for key, sample in container.occupied_slots():
                yield cid, container, key, sample
