"""
Firestore implementation of the DocumentStore contract.
"""

import asyncio
import logging
from typing import Any, Awaitable, Dict, List, Optional, TypeVar

from google.api_core import exceptions as gcp_exceptions
from google.cloud.firestore_v1.base_query import FieldFilter as FirestoreFieldFilter
from google.cloud.firestore_v1.field_path import FieldPath

from app.database.document_store import (
    DOCUMENT_ID,
    Document,
    DocumentNotFound,
    QuerySpec,
    StoreTimeout,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DESCENDING = "DESCENDING"
ASCENDING = "ASCENDING"


class FirestoreDocumentStore:
    def __init__(self, client, timeout_seconds: float = 10.0):
        self.client = client
        self.timeout_seconds = timeout_seconds

    async def _call(self, awaitable: Awaitable[T], what: str) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            logger.error(f"Firestore call timed out after {self.timeout_seconds}s: {what}")
            raise StoreTimeout(what) from e

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        snapshot = await self._call(
            self.client.collection(collection).document(doc_id).get(),
            f"get {collection}/{doc_id}",
        )
        if not snapshot.exists:
            return None
        return Document(id=snapshot.id, data=snapshot.to_dict() or {})

    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        await self._call(
            self.client.collection(collection).document(doc_id).set(data),
            f"set {collection}/{doc_id}",
        )

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        _, doc_ref = await self._call(
            self.client.collection(collection).add(data),
            f"add {collection}",
        )
        return doc_ref.id

    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        try:
            await self._call(
                self.client.collection(collection).document(doc_id).update(data),
                f"update {collection}/{doc_id}",
            )
        except gcp_exceptions.NotFound as e:
            raise DocumentNotFound(f"{collection}/{doc_id}") from e

    async def delete(self, collection: str, doc_id: str) -> None:
        await self._call(
            self.client.collection(collection).document(doc_id).delete(),
            f"delete {collection}/{doc_id}",
        )

    async def query(self, collection: str, spec: QuerySpec) -> List[Document]:
        collection_ref = self.client.collection(collection)
        query = collection_ref

        for flt in spec.filters:
            query = query.where(filter=FirestoreFieldFilter(flt.field, flt.op, flt.value))

        for order in spec.order_by:
            field_path = FieldPath.document_id() if order.field == DOCUMENT_ID else order.field
            query = query.order_by(field_path, direction=DESCENDING if order.descending else ASCENDING)

        if spec.start_after is not None:
            cursor = await self._call(
                collection_ref.document(spec.start_after).get(),
                f"get cursor {collection}/{spec.start_after}",
            )
            if not cursor.exists:
                raise DocumentNotFound(f"{collection}/{spec.start_after}")
            query = query.start_after(cursor)

        if spec.limit is not None:
            query = query.limit(spec.limit)

        snapshots = await self._call(query.get(), f"query {collection}")
        return [Document(id=s.id, data=s.to_dict() or {}) for s in snapshots]
