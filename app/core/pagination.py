"""
Paginated listing over the document store.

A resource describes its listing once (collection, filterable fields, search
fields, ordering) and picks exactly one strategy:

* OFFSET: store-side filters, full ordered fetch, client-side search, slice.
  Reports totals, so it suits collections that stay admin-sized.
* CURSOR: store-side filters, ordered scan resumed with start_after. The page
  token is opaque and bound to the filters/search/sort that produced it.
  Free-text search still runs client-side, so a searched cursor page may scan
  several store batches before it fills.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import json
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from app.config import settings
from app.core.errors import ValidationError
from app.core.schemas import CamelModel
from app.database.document_store import (
    ARRAY_CONTAINS_ANY,
    DOCUMENT_ID,
    EQUALS,
    Document,
    DocumentNotFound,
    DocumentStore,
    FieldFilter,
    OrderBy,
    QuerySpec,
    matches_filters,
)

PAGE_PARAM = "page"
LIMIT_PARAM = "limit"
SEARCH_PARAM = "search"
PAGE_TOKEN_PARAM = "pageToken"

# Firestore caps the number of values of an array-contains-any filter
MAX_ANY_OF_VALUES = 30


class PaginationStrategy(str, Enum):
    OFFSET = "offset"
    CURSOR = "cursor"


class FilterKind(str, Enum):
    EQUALS = "equals"
    ANY_OF = "any_of"  # comma separated, matched with array-contains-any
    BOOLEAN = "boolean"  # "true" / "false"


@dataclass(frozen=True)
class FilterField:
    name: str
    kind: FilterKind = FilterKind.EQUALS


@dataclass(frozen=True)
class Listing:
    collection: str
    strategy: PaginationStrategy
    filters: Tuple[FilterField, ...] = ()
    search_fields: Tuple[str, ...] = ()
    fixed_filters: Tuple[FieldFilter, ...] = ()
    order_field: str = "timestamp"

    def with_fixed(self, *filters: FieldFilter) -> "Listing":
        return Listing(
            collection=self.collection,
            strategy=self.strategy,
            filters=tuple(f for f in self.filters if f.name not in {x.field for x in filters}),
            search_fields=self.search_fields,
            fixed_filters=self.fixed_filters + tuple(filters),
            order_field=self.order_field,
        )

    @property
    def order_by(self) -> Tuple[OrderBy, ...]:
        # Document id breaks timestamp ties so page boundaries are deterministic
        return (OrderBy(self.order_field, descending=True), OrderBy(DOCUMENT_ID, descending=True))


@dataclass
class ListParams:
    filters: Tuple[FieldFilter, ...] = ()
    search: Optional[str] = None
    limit: int = 10
    page: int = 1
    page_token: Optional[str] = None


class OffsetPagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool


class CursorPagination(CamelModel):
    limit: int
    next_page_token: Optional[str] = None
    has_next_page: bool


@dataclass
class OffsetPage:
    items: List[Dict[str, Any]]
    pagination: OffsetPagination


@dataclass
class CursorPage:
    items: List[Dict[str, Any]]
    pagination: CursorPagination


def _parse_int(name: str, raw: Optional[str], default: int) -> int:
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")


def clamp_limit(value: int) -> int:
    return max(1, min(value, settings.max_page_limit))


def _parse_bool(name: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValidationError(f"{name} must be true or false")


def _to_field_filter(spec: FilterField, raw: str) -> FieldFilter:
    if spec.kind == FilterKind.BOOLEAN:
        return FieldFilter(spec.name, EQUALS, _parse_bool(spec.name, raw))
    if spec.kind == FilterKind.ANY_OF:
        values = [v.strip() for v in raw.split(",") if v.strip()]
        if not values:
            raise ValidationError(f"{spec.name} must list at least one value")
        if len(values) > MAX_ANY_OF_VALUES:
            raise ValidationError(f"{spec.name} accepts at most {MAX_ANY_OF_VALUES} values")
        return FieldFilter(spec.name, ARRAY_CONTAINS_ANY, values)
    return FieldFilter(spec.name, EQUALS, raw)


def _all_values(query_params: Mapping[str, str], name: str) -> List[str]:
    getlist = getattr(query_params, "getlist", None)
    if getlist is None:
        return [query_params[name]]
    return list(getlist(name))


def parse_list_params(listing: Listing, query_params: Mapping[str, str]) -> ListParams:
    """
    Turn raw query parameters into ListParams for a listing.

    Unknown or repeated parameters are rejected rather than ignored, and so
    are paging parameters that belong to the other strategy.
    """
    allowed = {f.name: f for f in listing.filters}
    paging = {LIMIT_PARAM, SEARCH_PARAM}
    paging.add(PAGE_PARAM if listing.strategy == PaginationStrategy.OFFSET else PAGE_TOKEN_PARAM)

    filters: List[FieldFilter] = list(listing.fixed_filters)
    for name in query_params.keys():
        if len(_all_values(query_params, name)) > 1:
            raise ValidationError(f"Duplicate query parameter: {name}")
        if name in paging:
            continue
        if name not in allowed:
            raise ValidationError(f"Unknown query parameter: {name}")
        raw = query_params.get(name)
        if raw is None or raw == "":
            continue
        filters.append(_to_field_filter(allowed[name], raw))

    search = (query_params.get(SEARCH_PARAM) or "").strip() or None
    limit = clamp_limit(_parse_int(LIMIT_PARAM, query_params.get(LIMIT_PARAM), settings.default_page_limit))
    page = max(1, _parse_int(PAGE_PARAM, query_params.get(PAGE_PARAM), 1))
    page_token = (query_params.get(PAGE_TOKEN_PARAM) or "").strip() or None

    return ListParams(
        filters=tuple(filters),
        search=search,
        limit=limit,
        page=page,
        page_token=page_token,
    )


def matches_search(data: Mapping[str, Any], fields: Tuple[str, ...], search: Optional[str]) -> bool:
    """Case-insensitive substring match on any of the given text fields."""
    if not search:
        return True
    needle = search.lower()
    for name in fields:
        value = data.get(name)
        if isinstance(value, str) and needle in value.lower():
            return True
    return False


def query_fingerprint(listing: Listing, params: ListParams) -> str:
    payload = {
        "collection": listing.collection,
        "filters": sorted(json.dumps([f.field, f.op, f.value], default=str) for f in params.filters),
        "search": (params.search or "").lower(),
        "order": [[o.field, o.descending] for o in listing.order_by],
    }
    encoded = json.dumps(payload, sort_keys=True, default=str).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()[:16]


def encode_page_token(doc_id: str, fingerprint: str) -> str:
    raw = json.dumps({"id": doc_id, "fp": fingerprint}, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode_page_token(token: str) -> Tuple[str, str]:
    try:
        padded = token + "=" * (-len(token) % 4)
        payload = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
        doc_id, fingerprint = payload["id"], payload["fp"]
    except (binascii.Error, ValueError, UnicodeError, KeyError, TypeError):
        raise ValidationError("Invalid page token")
    if not isinstance(doc_id, str) or not isinstance(fingerprint, str) or not doc_id:
        raise ValidationError("Invalid page token")
    return doc_id, fingerprint


async def paginate_offset(store: DocumentStore, listing: Listing, params: ListParams) -> OffsetPage:
    documents = await store.query(
        listing.collection,
        QuerySpec(filters=params.filters, order_by=listing.order_by),
    )
    results = [
        doc.to_dict() for doc in documents
        if matches_search(doc.data, listing.search_fields, params.search)
    ]

    total = len(results)
    offset = (params.page - 1) * params.limit
    return OffsetPage(
        items=results[offset:offset + params.limit],
        pagination=OffsetPagination(
            page=params.page,
            limit=params.limit,
            total=total,
            total_pages=math.ceil(total / params.limit),
            has_next_page=params.page * params.limit < total,
        ),
    )


async def _resolve_cursor(store: DocumentStore, listing: Listing, params: ListParams, fingerprint: str) -> Optional[str]:
    if not params.page_token:
        return None
    doc_id, token_fingerprint = decode_page_token(params.page_token)
    if token_fingerprint != fingerprint:
        raise ValidationError("Page token does not match this query")
    cursor: Optional[Document] = await store.get(listing.collection, doc_id)
    if (
        cursor is None
        or listing.order_field not in cursor.data
        or not matches_filters(cursor.data, params.filters)
        or not matches_search(cursor.data, listing.search_fields, params.search)
    ):
        raise ValidationError("Page token is no longer valid")
    return doc_id


async def paginate_cursor(store: DocumentStore, listing: Listing, params: ListParams) -> CursorPage:
    fingerprint = query_fingerprint(listing, params)
    start_after = await _resolve_cursor(store, listing, params, fingerprint)

    items: List[Dict[str, Any]] = []
    while len(items) < params.limit:
        try:
            batch = await store.query(
                listing.collection,
                QuerySpec(
                    filters=params.filters,
                    order_by=listing.order_by,
                    limit=params.limit,
                    start_after=start_after,
                ),
            )
        except DocumentNotFound:
            # Cursor document removed between validation and the query
            raise ValidationError("Page token is no longer valid")
        for doc in batch:
            if matches_search(doc.data, listing.search_fields, params.search):
                items.append(doc.to_dict())
                if len(items) == params.limit:
                    break
        if len(batch) < params.limit or not params.search:
            break
        start_after = batch[-1].id

    next_page_token = None
    if len(items) == params.limit:
        next_page_token = encode_page_token(items[-1]["id"], fingerprint)

    return CursorPage(
        items=items,
        pagination=CursorPagination(
            limit=params.limit,
            next_page_token=next_page_token,
            has_next_page=next_page_token is not None,
        ),
    )


async def paginate(store: DocumentStore, listing: Listing, params: ListParams):
    """Run the listing's own strategy."""
    if listing.strategy == PaginationStrategy.CURSOR:
        return await paginate_cursor(store, listing, params)
    return await paginate_offset(store, listing, params)
