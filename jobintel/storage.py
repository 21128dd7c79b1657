"""Local key-value store and the job-list record store on top of it."""
from __future__ import annotations

import json
import os
import re
import tempfile
from pathlib import Path
from typing import Protocol

from jobintel.config import JOBS_KEY, data_dir
from jobintel.log import get_logger
from jobintel.models import Job

log = get_logger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """In-process store; handy for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class FileStore:
    """One file per key under *root*; values are opaque strings."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = Path(root) if root is not None else data_dir()

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.root / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        self.root.mkdir(parents=True, exist_ok=True)
        # Write to a sibling temp file, then swap it in.
        fd, tmp = tempfile.mkstemp(dir=self.root, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        log.debug("Stored %d bytes under %s", len(value), key)


class RecordStore:
    """Persists the full job list as one JSON array under a fixed key."""

    def __init__(self, kv: KeyValueStore, key: str = JOBS_KEY) -> None:
        self.kv = kv
        self.key = key

    def load_jobs(self) -> list[Job] | None:
        """Return the stored jobs, or None if nothing was saved yet.

        Malformed data raises ``ValueError`` (bad JSON, a non-object item, or
        pydantic's ``ValidationError``) or ``KeyError``/``TypeError``.
        """
        raw = self.kv.get(self.key)
        if raw is None:
            return None
        payload = json.loads(raw)
        if not isinstance(payload, list):
            raise ValueError(f"Expected a JSON array under {self.key!r}, got {type(payload).__name__}")
        for item in payload:
            if not isinstance(item, dict):
                raise ValueError(f"Expected a job object, got {type(item).__name__}")
        return [Job.from_dict(item) for item in payload]

    def save_jobs(self, jobs: list[Job]) -> None:
        self.kv.set(self.key, json.dumps([j.to_dict() for j in jobs], ensure_ascii=False))
        log.debug("Persisted %d jobs", len(jobs))
