"""Document store interface shared by the Firestore and file backends."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

COLLECTIONS = ("users", "tasks", "events", "messages")


@dataclass(frozen=True, slots=True)
class Filter:
    """Equality (``==``) or membership (``in``) test on one document field."""

    field: str
    op: str
    value: Any

    def matches(self, doc: Dict[str, Any]) -> bool:
        actual = doc.get(self.field)
        if self.op == "==":
            return actual == self.value
        if self.op == "in":
            return actual in self.value
        raise ValueError(f"Unsupported filter operator '{self.op}'")


def where(field: str, value: Any) -> Filter:
    return Filter(field, "==", value)


def where_in(field: str, values: Iterable[Any]) -> Filter:
    return Filter(field, "in", list(values))


def apply_query(
    docs: Iterable[Dict[str, Any]],
    filters: Sequence[Filter] = (),
    order_by: Optional[str] = None,
    descending: bool = False,
    offset: int = 0,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """Filter, order and page plain dicts in memory.

    Documents missing the ``order_by`` field sort after those that have it.
    """

    result = [doc for doc in docs if all(f.matches(doc) for f in filters)]
    if order_by:
        present = [doc for doc in result if doc.get(order_by) is not None]
        absent = [doc for doc in result if doc.get(order_by) is None]
        present.sort(key=lambda doc: doc[order_by], reverse=descending)
        result = present + absent
    if offset:
        result = result[offset:]
    if limit is not None:
        result = result[:limit]
    return result


class DocumentStore:
    """Collection-oriented CRUD over JSON-like documents keyed by ``id``."""

    backend = "abstract"

    def insert(self, collection: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def find(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def count(self, collection: str, filters: Sequence[Filter] = ()) -> int:
        return len(self.find(collection, filters))

    def replace(self, collection: str, doc_id: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    def delete(self, collection: str, doc_id: str) -> bool:
        raise NotImplementedError

    def probe(self) -> Dict[str, Any]:
        """Connectivity and write test for diagnostics."""
        raise NotImplementedError

    def close(self) -> None:
        """Release any cached connection."""
