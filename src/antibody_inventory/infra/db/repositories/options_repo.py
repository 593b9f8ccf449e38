from __future__ import annotations

import json
import logging

from .kv_repo import KeyValueRepo

logger = logging.getLogger(__name__)


class OptionsRepo:
    """Custom dropdown options, stored as ``{field: [value, ...]}`` in their own slot."""

    def __init__(self, kv: KeyValueRepo, key: str) -> None:
        self._kv = kv
        self._key = key

    def load(self) -> dict[str, list[str]]:
        blob = self._kv.get(self._key)
        if blob is None:
            return {}
        try:
            raw = json.loads(blob)
        except ValueError as e:
            logger.warning("discarding unreadable custom options in slot %r: %s", self._key, e)
            return {}
        if not isinstance(raw, dict):
            return {}
        return {
            str(field): [v for v in values if isinstance(v, str)]
            for field, values in raw.items()
            if isinstance(values, list)
        }

    def save(self, options: dict[str, list[str]]) -> None:
        self._kv.set(self._key, json.dumps(options, ensure_ascii=False).encode("utf-8"))
