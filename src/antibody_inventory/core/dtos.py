from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from antibody_inventory.core.models import Sample


class DTOBase(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
        alias_generator=to_camel,
        str_strip_whitespace=True,
        strict=True,
    )


class ContainerSummaryDTO(DTOBase):
    id: str
    name: str
    rows: int
    cols: int
    occupied: int


class GridCellDTO(DTOBase):
    position: str
    row: int
    col: int
    sample: Sample | None = None


class SearchMatchDTO(DTOBase):
    container_id: str
    container_name: str
    position: str
    name: str
    clone_id: str = ""
    vendor: str = ""
    catalog_number: str = ""
    host_species: str = ""


class WarningDTO(DTOBase):
    name: str
    vendor: str = ""
    container_id: str
    container_name: str
    position: str
    remaining: float
    unit: str = ""
    threshold: float


class NameStatsDTO(DTOBase):
    name: str
    count: int
    at_risk: bool


class QuantityStatusDTO(DTOBase):
    valid: bool
    remaining: float | None = None
    unit: str = ""
    threshold: float | None = None
    low: bool = False
