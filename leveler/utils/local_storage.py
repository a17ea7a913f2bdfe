"""
Local key/value storage shim.

A JSON file holding string keys mapped to JSON-serialized values, mirroring the
browser storage the assessment UI persists to. Reads never raise: a missing key
or a value that fails to decode falls back to the caller-supplied default.

Usage:
    from leveler.utils.local_storage import LocalStorage

    storage = LocalStorage(Path("outs/storage/leveler.json"))
    storage.set("team-member-name", "Ada")
    storage.get("current-level", 1)
"""

import json
from pathlib import Path
from typing import Any, Dict

from loguru import logger


class LocalStorage:
    """JSON-file backed key/value store with default-on-failure reads."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_raw(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Local storage file {self.path} is corrupt: {e}")
            return {}
        if not isinstance(raw, dict):
            logger.error(f"Local storage file {self.path} does not hold an object")
            return {}
        return raw

    def _write_raw(self, entries: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(entries, indent=2), encoding="utf-8")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Read and decode the value stored under key.

        Returns default when the key is absent or its value is not valid JSON.
        """
        entries = self._read_raw()
        if key not in entries:
            return default
        try:
            return json.loads(entries[key])
        except (json.JSONDecodeError, TypeError) as e:
            logger.error(f'Error reading local storage key "{key}": {e}')
            return default

    def set(self, key: str, value: Any) -> None:
        """Serialize value to JSON and store it under key."""
        entries = self._read_raw()
        entries[key] = json.dumps(value)
        self._write_raw(entries)

    def remove(self, key: str) -> None:
        entries = self._read_raw()
        if entries.pop(key, None) is not None:
            self._write_raw(entries)

    def keys(self) -> list[str]:
        return list(self._read_raw().keys())

    def clear(self) -> None:
        self._write_raw({})
