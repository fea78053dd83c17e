"""A JSON list-of-records file with locked read-modify-write.

Each repository keeps its documents in one file. Readers load the whole
file; writers take an exclusive ``fcntl`` lock on a sibling ``.lock``
file for the whole read-modify-write and replace the data file
atomically, so separate processes never interleave updates.
"""

from __future__ import annotations

import fcntl
import json
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


class JsonFile:

    def __init__(self, file_path: Path) -> None:
        self.path = file_path
        self._lock_path = file_path.with_name(f".{file_path.name}.lock")
        self._ensure_file()

    def load(self) -> list[dict]:
        return json.loads(self.path.read_text(encoding="utf-8"))

    @contextmanager
    def update(self) -> Iterator[list[dict]]:
        """Yield the records under lock; whatever the caller leaves is written back.

        If the body raises, nothing is written.
        """
        with open(self._lock_path, "w") as lock_file:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
            try:
                records = self.load()
                yield records
                self._persist(records)
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def _persist(self, records: list[dict]) -> None:
        fd, temp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.stem}_", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2)
                f.write("\n")
            os.replace(temp_path, self.path)
        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    def _ensure_file(self) -> None:
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("[]", encoding="utf-8")
