from __future__ import annotations

from antibody_inventory.core.dtos import SearchMatchDTO
from antibody_inventory.core.models import Database, Sample

# Fields matched by free-text search, in haystack order.
SEARCHABLE_FIELDS = (
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
    "remark",
)


def haystack(sample: Sample) -> str:
    return " ".join(v for f in SEARCHABLE_FIELDS if (v := getattr(sample, f))).lower()


def search(database: Database, query: str, *, sort_by_name: bool = False) -> list[SearchMatchDTO]:
    """
    Case-insensitive substring search across every occupied slot.

    A blank query returns nothing. Results come in container then slot
    insertion order unless ``sort_by_name`` asks for a stable name sort.
    """
    term = (query or "").strip().lower()
    if not term:
        return []
    matches = [
        SearchMatchDTO(
            container_id=cid,
            container_name=container.name,
            position=key,
            name=sample.name,
            clone_id=sample.clone_id,
            vendor=sample.vendor,
            catalog_number=sample.catalog_number,
            host_species=sample.host_species,
        )
        for cid, container, key, sample in database.iter_samples()
        if term in haystack(sample)
    ]
    if sort_by_name:
        matches.sort(key=lambda m: m.name.lower())
    return matches
