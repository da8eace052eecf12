"""Client-local key-value storage persisted as one JSON file.

Holds the ``guest_cart`` and ``token`` keys. Without a path the store lives
in memory only.
"""

import json
from pathlib import Path
from typing import Any

from shoestore.utils.logging import get_logger

logger = get_logger(__name__)

GUEST_CART_KEY = "guest_cart"
TOKEN_KEY = "token"


class LocalStore:
    def __init__(self, path: Path | None = None) -> None:
        self.path = Path(path) if path else None
        self._data: dict[str, Any] = self._read()

    def _read(self) -> dict[str, Any]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("local_store_unreadable", path=str(self.path), error=str(exc))
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data), encoding="utf-8")

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._write()

    def remove(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._write()
