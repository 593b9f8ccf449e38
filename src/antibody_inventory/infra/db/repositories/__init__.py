from .kv_repo import KeyValueRepo
from .options_repo import OptionsRepo
from .snapshot_repo import SnapshotRepo

__all__ = ["KeyValueRepo", "OptionsRepo", "SnapshotRepo"]
