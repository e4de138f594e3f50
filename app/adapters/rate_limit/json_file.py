"""JSON-file state store.

Keeps every identity's state in one small JSON document on local disk, so a
visitor's window survives restarts of the submitting process. Writes go to a
temporary file first and are renamed into place.
"""

from __future__ import annotations

import json
import os
import threading
from pathlib import Path
from typing import Any

from app.adapters.rate_limit.base import AbstractStateStore, RateLimitState


class JsonFileStateStore(AbstractStateStore):
    """File-backed store keyed by identity string.

    Errors (unreadable file, invalid JSON, malformed entries) propagate to the
    caller; the rate limit guard treats them as absent state.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, Any]:
        if not self._path.is_file():
            return {}
        data = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        if not isinstance(data, dict):
            raise ValueError(f"{self._path} does not contain a JSON object")
        return data

    def _write_all(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(json.dumps(data), encoding="utf-8")
        os.replace(tmp_path, self._path)

    def get(self, key: str) -> RateLimitState | None:
        with self._lock:
            raw = self._read_all().get(key)
        if raw is None:
            return None
        return RateLimitState.from_dict(raw)

    def set(self, key: str, state: RateLimitState) -> None:
        with self._lock:
            try:
                data = self._read_all()
            except ValueError:
                # Corrupt document: start over rather than never writing again
                data = {}
            data[key] = state.to_dict()
            self._write_all(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._read_all()
            if data.pop(key, None) is not None:
                self._write_all(data)
