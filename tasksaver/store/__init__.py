"""Document store package - Firestore with a local file backend."""
from __future__ import annotations

from ..config import Settings
from .base import COLLECTIONS, DocumentStore, Filter, apply_query, where, where_in
from .file import FileStore


def build_store(settings: Settings) -> DocumentStore:
    """Create the store backend named by ``settings.store_backend``."""
    if settings.store_backend == "file":
        return FileStore(settings.data_dir)

    from .firestore import FirestoreStore

    return FirestoreStore(project=settings.firestore_project)


__all__ = [
    "COLLECTIONS",
    "DocumentStore",
    "FileStore",
    "Filter",
    "apply_query",
    "build_store",
    "where",
    "where_in",
]
