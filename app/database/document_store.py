"""
Document store abstraction: the collection/document/query contract the rest of
the app depends on, plus an in-memory implementation for tests and local runs.
"""

from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

# Field path of the document id, usable in order_by like any other field
DOCUMENT_ID = "__name__"

EQUALS = "=="
ARRAY_CONTAINS_ANY = "array-contains-any"
SUPPORTED_OPERATORS = (EQUALS, ARRAY_CONTAINS_ANY)


class StoreError(Exception):
    """Base class for document store failures."""


class DocumentNotFound(StoreError):
    pass


class StoreTimeout(StoreError):
    pass


@dataclass
class Document:
    id: str
    data: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, **self.data}


@dataclass(frozen=True)
class FieldFilter:
    field: str
    op: str
    value: Any

    def __post_init__(self):
        if self.op not in SUPPORTED_OPERATORS:
            raise ValueError(f"unsupported operator: {self.op}")


@dataclass(frozen=True)
class OrderBy:
    field: str
    descending: bool = True


@dataclass(frozen=True)
class QuerySpec:
    filters: Tuple[FieldFilter, ...] = ()
    order_by: Tuple[OrderBy, ...] = ()
    limit: Optional[int] = None
    # Resume strictly after the document with this id (in the query's order)
    start_after: Optional[str] = None


class DocumentStore(Protocol):
    """Interface for document access."""

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        ...

    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        ...

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        ...

    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        ...

    async def delete(self, collection: str, doc_id: str) -> None:
        ...

    async def query(self, collection: str, spec: QuerySpec) -> List[Document]:
        ...


def matches_filter(data: Dict[str, Any], flt: FieldFilter) -> bool:
    if flt.field not in data:
        return False
    value = data[flt.field]
    if flt.op == EQUALS:
        return value == flt.value
    # array-contains-any
    if not isinstance(value, (list, tuple)):
        return False
    return any(item in value for item in flt.value)


def matches_filters(data: Dict[str, Any], filters: Iterable[FieldFilter]) -> bool:
    return all(matches_filter(data, flt) for flt in filters)


def _sort_value(doc: Document, field_name: str) -> Tuple[bool, Any]:
    # null sorts below every other value, as in Firestore
    if field_name == DOCUMENT_ID:
        return True, doc.id
    value = doc.data[field_name]
    return value is not None, value


def sort_documents(docs: Sequence[Document], order_by: Sequence[OrderBy]) -> List[Document]:
    """Multi-key sort, least significant key first so each pass stays stable."""
    ordered = list(docs)
    for order in reversed(order_by):
        ordered.sort(key=lambda d, f=order.field: _sort_value(d, f), reverse=order.descending)
    return ordered


@dataclass
class InMemoryDocumentStore:
    """
    Dict-backed store with the same query semantics the app relies on from
    Firestore: documents lacking an order_by field are excluded from ordered
    queries, null order values sort lowest, and start_after positions by the
    cursor document's sort values.
    """

    collections: Dict[str, Dict[str, Dict[str, Any]]] = field(default_factory=dict)

    def reset(self) -> None:
        self.collections.clear()

    def _collection(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self.collections.setdefault(name, {})

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        data = self._collection(collection).get(doc_id)
        if data is None:
            return None
        return Document(id=doc_id, data=copy.deepcopy(data))

    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        self._collection(collection)[doc_id] = copy.deepcopy(data)

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex[:20]
        self._collection(collection)[doc_id] = copy.deepcopy(data)
        return doc_id

    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        docs = self._collection(collection)
        if doc_id not in docs:
            raise DocumentNotFound(f"{collection}/{doc_id}")
        docs[doc_id].update(copy.deepcopy(data))

    async def delete(self, collection: str, doc_id: str) -> None:
        self._collection(collection).pop(doc_id, None)

    async def query(self, collection: str, spec: QuerySpec) -> List[Document]:
        docs = self._collection(collection)
        order_fields = [o.field for o in spec.order_by if o.field != DOCUMENT_ID]

        def orderable(data: Dict[str, Any]) -> bool:
            return all(f in data for f in order_fields)

        candidates = [
            Document(id=doc_id, data=copy.deepcopy(data))
            for doc_id, data in docs.items()
            if matches_filters(data, spec.filters) and orderable(data)
        ]

        if spec.start_after is not None:
            cursor_data = docs.get(spec.start_after)
            if cursor_data is None or not orderable(cursor_data):
                raise DocumentNotFound(f"{collection}/{spec.start_after}")
            cursor = Document(id=spec.start_after, data=cursor_data)
            ordered = sort_documents(
                [d for d in candidates if d.id != cursor.id] + [cursor], spec.order_by
            )
            position = next(i for i, d in enumerate(ordered) if d.id == cursor.id)
            ordered = ordered[position + 1:]
        else:
            ordered = sort_documents(candidates, spec.order_by)

        if spec.limit is not None:
            ordered = ordered[:spec.limit]
        return ordered
