"""Key-value persistence for editor state."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from ..config import settings

logger = logging.getLogger(__name__)

DATASET_KEY = "opr-data"
SELECTED_ROUTE_KEY = "opr-selected-route"
SELECTED_WAYPOINT_KEY = "opr-selected-waypoint"
API_KEY_KEY = "opr-api-key"


class KeyValueStorage(Protocol):
    def get(self, key: str) -> Any | None:
        """Return the decoded value for ``key`` or None when absent or unreadable."""

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` JSON-encoded under ``key``."""


class FileStorage:
    """Thin wrapper around the data root storing one JSON file per key."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.state_root = self.root / "state"
        self.state_root.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self.state_root / f"{key}.json"

    def get(self, key: str) -> Any | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning(f"Ignoring unreadable persisted value for '{key}': {exc}")
            return None

    def set(self, key: str, value: Any) -> None:
        self.write_json(self.path_for(key), value)

    def write_json(self, path: Path, data: Any, *, indent: int = 2) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=indent)


class InMemoryStorage:
    """Storage that keeps JSON-encoded values in a dict, for tests and ephemeral sessions."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self.values: dict[str, str] = {}
        self.writes: list[str] = []
        for key, value in (initial or {}).items():
            self.values[key] = json.dumps(value)

    def get(self, key: str) -> Any | None:
        raw = self.values.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning(f"Ignoring unreadable persisted value for '{key}': {exc}")
            return None

    def set(self, key: str, value: Any) -> None:
        self.values[key] = json.dumps(value)
        self.writes.append(key)
