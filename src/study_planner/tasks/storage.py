# src/study_planner/tasks/storage.py

"""
Durable named records (a local, file-backed analogue of browser localStorage).

Each record is a single string value under a key. The task store keeps the
whole collection in one record as a JSON array.
"""

from __future__ import annotations

import contextlib
import logging
import os
import re
from pathlib import Path

logger = logging.getLogger(__name__)

_SAFE_KEY_RE = re.compile(r"[^A-Za-z0-9_.-]+")


class JsonFileStorage:
    """
    One file per record: <directory>/<key>.json.

    Writes go to a temporary file first and are moved into place with
    os.replace, so a crash never leaves a half-written record behind.
    """

    def __init__(self, directory: str | Path) -> None:
        self._dir = Path(directory)

    def path_for(self, key: str) -> Path:
        safe = _SAFE_KEY_RE.sub("_", key).strip("._") or "record"
        return self._dir / f"{safe}.json"

    def get_item(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text("utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, "utf-8")
        os.replace(tmp, path)
        with contextlib.suppress(Exception):
            os.chmod(path, 0o600)
        logger.debug("Wrote record key=%s bytes=%d path=%s", key, len(value), path)


class MemoryStorage:
    """Dict-backed records for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value
