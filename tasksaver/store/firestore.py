"""Firestore backend.

Collections live at the top level (``users``, ``tasks``, ``events``,
``messages``) and documents are keyed by their ``id`` field. The client is
created on first use and kept for the life of the store; transport failures
drop it so the next call reconnects.
"""
from __future__ import annotations

from contextlib import contextmanager
import logging
import threading
import time
import uuid
from typing import Any, Dict, Iterator, List, Optional, Sequence

import firebase_admin
from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions

from ..errors import StoreUnavailableError
from .base import DocumentStore, Filter, apply_query

logger = logging.getLogger(__name__)

_CONNECTION_ERRORS = (
    google_exceptions.ServiceUnavailable,
    google_exceptions.DeadlineExceeded,
    google_exceptions.RetryError,
)


class FirestoreStore(DocumentStore):
    backend = "firestore"

    def __init__(self, project: Optional[str] = None) -> None:
        self.project = project
        self._client = None
        self._lock = threading.Lock()

    def _get_client(self):
        if self._client is not None:
            return self._client
        with self._lock:
            if self._client is None:
                if not firebase_admin._apps:
                    options = {"projectId": self.project} if self.project else None
                    firebase_admin.initialize_app(options=options)
                self._client = firestore.client()
                logger.info("Firestore client initialized")
        return self._client

    def close(self) -> None:
        self._client = None

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except _CONNECTION_ERRORS as exc:
            logger.warning(f"Firestore {operation} failed, dropping cached client: {exc}")
            self.close()
            raise StoreUnavailableError("Database connection failed. Please try again later.") from exc
        except (auth_exceptions.DefaultCredentialsError, ValueError) as exc:
            logger.error(f"Firestore {operation} could not initialize: {exc}")
            self.close()
            raise StoreUnavailableError(f"Database unavailable: {exc}") from exc

    def insert(self, collection: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        with self._guard("insert"):
            self._get_client().collection(collection).document(doc["id"]).set(doc)
        return doc

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        with self._guard("get"):
            snapshot = self._get_client().collection(collection).document(doc_id).get()
            if snapshot.exists:
                return snapshot.to_dict()
        return None

    def find(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        # Ordering and paging happen in memory so mixed equality/ordering
        # queries do not need composite indexes.
        with self._guard("find"):
            query = self._get_client().collection(collection)
            for item in filters:
                query = query.where(item.field, item.op, item.value)
            docs = [snapshot.to_dict() for snapshot in query.stream()]
        return apply_query(docs, (), order_by, descending, offset, limit)

    def count(self, collection: str, filters: Sequence[Filter] = ()) -> int:
        return len(self.find(collection, filters))

    def replace(self, collection: str, doc_id: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        with self._guard("replace"):
            self._get_client().collection(collection).document(doc_id).set(doc)
        return doc

    def delete(self, collection: str, doc_id: str) -> bool:
        with self._guard("delete"):
            doc_ref = self._get_client().collection(collection).document(doc_id)
            if not doc_ref.get().exists:
                return False
            doc_ref.delete()
        return True

    def probe(self) -> Dict[str, Any]:
        started = time.perf_counter()
        with self._guard("probe"):
            client = self._get_client()
            collections = [ref.id for ref in client.collections()]
            doc_ref = client.collection("health_probe").document(f"probe-{uuid.uuid4()}")
            doc_ref.set({"test": "connection-test"})
            doc_ref.delete()
        return {
            "backend": self.backend,
            "location": self.project or "default",
            "collections": collections,
            "writeTest": True,
            "connectionTime": f"{(time.perf_counter() - started) * 1000:.0f}ms",
        }
