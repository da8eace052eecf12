"""Client configuration read from the environment."""

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_API_URL = "http://localhost:8000/api/v1"
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class ClientConfig:
    api_url: str = DEFAULT_API_URL
    payment_key_id: str | None = None
    storage_path: Path | None = None
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls) -> "ClientConfig":
        storage = os.getenv("SHOESTORE_STORAGE_PATH")
        return cls(
            api_url=os.getenv("SHOESTORE_API_URL", DEFAULT_API_URL).rstrip("/"),
            payment_key_id=os.getenv("SHOESTORE_PAYMENT_KEY_ID") or None,
            storage_path=Path(storage).expanduser() if storage else None,
            timeout=float(os.getenv("SHOESTORE_TIMEOUT", str(DEFAULT_TIMEOUT))),
        )
