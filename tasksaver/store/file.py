"""JSONL file backend.

One ``<collection>.jsonl`` file per collection under the data directory.
Every write rewrites the collection file under a process-wide lock.
"""
from __future__ import annotations

import json
import logging
import threading
import time
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..errors import StoreUnavailableError
from .base import COLLECTIONS, DocumentStore, Filter, apply_query

logger = logging.getLogger(__name__)


class FileStore(DocumentStore):
    backend = "file"

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        self._lock = threading.Lock()

    def _path(self, collection: str) -> Path:
        return self.directory / f"{collection}.jsonl"

    def _read(self, collection: str) -> Dict[str, Dict[str, Any]]:
        path = self._path(collection)
        docs: Dict[str, Dict[str, Any]] = {}
        if not path.exists():
            return docs
        with path.open("r", encoding="utf-8") as handle:
            for line in handle:
                line = line.strip()
                if not line:
                    continue
                try:
                    data = json.loads(line)
                except json.JSONDecodeError:
                    logger.warning(f"Skipping corrupt line in {path.name}")
                    continue
                docs[data["id"]] = data
        return docs

    def _write(self, collection: str, docs: Dict[str, Dict[str, Any]]) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path = self._path(collection)
            with path.open("w", encoding="utf-8") as handle:
                for data in docs.values():
                    handle.write(json.dumps(data) + "\n")
        except OSError as exc:
            raise StoreUnavailableError(f"File store write failed: {exc}") from exc

    def insert(self, collection: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            docs = self._read(collection)
            docs[doc["id"]] = doc
            self._write(collection, docs)
        return doc

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self._read(collection).get(doc_id)

    def find(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        with self._lock:
            docs = list(self._read(collection).values())
        return apply_query(docs, filters, order_by, descending, offset, limit)

    def replace(self, collection: str, doc_id: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            docs = self._read(collection)
            docs[doc_id] = doc
            self._write(collection, docs)
        return doc

    def delete(self, collection: str, doc_id: str) -> bool:
        with self._lock:
            docs = self._read(collection)
            if doc_id not in docs:
                return False
            del docs[doc_id]
            self._write(collection, docs)
        return True

    def probe(self) -> Dict[str, Any]:
        started = time.perf_counter()
        probe_id = f"probe-{uuid.uuid4()}"
        self.insert("health_probe", {"id": probe_id, "test": "connection-test"})
        write_ok = self.delete("health_probe", probe_id)
        return {
            "backend": self.backend,
            "location": str(self.directory),
            "collections": [name for name in COLLECTIONS if self._path(name).exists()],
            "writeTest": write_ok,
            "connectionTime": f"{(time.perf_counter() - started) * 1000:.0f}ms",
        }
