"""On-disk copy of the last fetched collections, plus the saved session."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

CACHED_KINDS = ("tasks", "events", "messages")
SESSION_FILE = "session.json"


class LocalCache:
    """JSONL files of wire-form records, one file per kind."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def _path(self, kind: str) -> Path:
        if kind not in CACHED_KINDS:
            raise ValueError(f"Unknown cache kind '{kind}'")
        return self.directory / f"{kind}.jsonl"

    def has(self, kind: str) -> bool:
        return self._path(kind).exists()

    def load(self, kind: str) -> List[Dict[str, Any]]:
        path = self._path(kind)
        if not path.exists():
            return []
        records = []
        with path.open("r", encoding="utf-8") as handle:
            for line in handle:
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(json.loads(line))
                except json.JSONDecodeError:
                    logger.warning(f"Skipping corrupt line in {path.name}")
        return records

    def save(self, kind: str, records: List[Dict[str, Any]]) -> None:
        path = self._path(kind)
        self.directory.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            for record in records:
                handle.write(json.dumps(record) + "\n")

    def upsert(self, kind: str, record: Dict[str, Any]) -> None:
        records = [r for r in self.load(kind) if r.get("id") != record["id"]]
        records.append(record)
        self.save(kind, records)

    def remove(self, kind: str, record_id: str) -> None:
        self.save(kind, [r for r in self.load(kind) if r.get("id") != record_id])

    def clear(self) -> None:
        """Drop every cached collection."""
        for kind in CACHED_KINDS:
            self._path(kind).unlink(missing_ok=True)

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------
    def load_session(self) -> Optional[Dict[str, Any]]:
        path = self.directory / SESSION_FILE
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable session file")
            return None

    def save_session(self, token: str, user: Dict[str, Any]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / SESSION_FILE
        path.write_text(json.dumps({"token": token, "user": user}), encoding="utf-8")
        path.chmod(0o600)

    def clear_session(self) -> None:
        (self.directory / SESSION_FILE).unlink(missing_ok=True)
