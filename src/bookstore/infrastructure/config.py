"""Runtime settings read from the environment.

Read once by the composition root; everything downstream receives plain
values, never the environment itself.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

CART_BACKENDS = ("json", "memory")


@dataclass(frozen=True)
class Settings:
    data_dir: Path = _DEFAULT_DATA_DIR
    log_level: str = "WARNING"
    cart_backend: str = "json"

    @staticmethod
    def from_env() -> Settings:
        backend = os.environ.get("BOOKSTORE_CART_BACKEND", "json").lower()
        if backend not in CART_BACKENDS:
            raise ValueError(
                f"BOOKSTORE_CART_BACKEND must be one of {', '.join(CART_BACKENDS)}, "
                f"got {backend!r}"
            )
        return Settings(
            data_dir=Path(os.environ.get("BOOKSTORE_DATA_DIR", _DEFAULT_DATA_DIR)),
            log_level=os.environ.get("BOOKSTORE_LOG_LEVEL", "WARNING").upper(),
            cart_backend=backend,
        )
