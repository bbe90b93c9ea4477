from datetime import datetime, timezone
from typing import Any, Dict, Mapping
import logging

from app.core.errors import NotFound
from app.core.pagination import (
    FilterField,
    FilterKind,
    Listing,
    PaginationStrategy,
    paginate,
    parse_list_params,
)
from app.database.document_store import EQUALS, DocumentNotFound, DocumentStore, FieldFilter
from app.modules.blog.models import BLOG_COLLECTION
from app.modules.blog.schemas import BlogCreate, BlogListResponse, BlogResponse, BlogUpdate

logger = logging.getLogger(__name__)

# Admin view: drafts included, isPublished is an ordinary filter
ADMIN_BLOG_LISTING = Listing(
    collection=BLOG_COLLECTION,
    strategy=PaginationStrategy.CURSOR,
    filters=(
        FilterField("category"),
        FilterField("author"),
        FilterField("tags", FilterKind.ANY_OF),
        FilterField("isPublished", FilterKind.BOOLEAN),
    ),
    search_fields=("title", "content", "author", "category"),
)

PUBLIC_BLOG_LISTING = ADMIN_BLOG_LISTING.with_fixed(FieldFilter("isPublished", EQUALS, True))


class BlogService:
    def __init__(self, store: DocumentStore):
        self.store = store

    async def _list(self, listing: Listing, query_params: Mapping[str, str]) -> BlogListResponse:
        params = parse_list_params(listing, query_params)
        page = await paginate(self.store, listing, params)
        return BlogListResponse(
            blogs=[BlogResponse.model_validate(item) for item in page.items],
            pagination=page.pagination,
        )

    async def list_published(self, query_params: Mapping[str, str]) -> BlogListResponse:
        return await self._list(PUBLIC_BLOG_LISTING, query_params)

    async def list_all(self, query_params: Mapping[str, str]) -> BlogListResponse:
        return await self._list(ADMIN_BLOG_LISTING, query_params)

    async def get_post(self, post_id: str, include_drafts: bool = False) -> BlogResponse:
        doc = await self.store.get(BLOG_COLLECTION, post_id)
        if doc is None or (not include_drafts and doc.data.get("isPublished") is not True):
            raise NotFound("Blog post not found")
        return BlogResponse.model_validate(doc.to_dict())

    async def create_post(self, post_data: BlogCreate, created_by: str) -> str:
        post_id = await self.store.add(BLOG_COLLECTION, {
            **post_data.model_dump(by_alias=True),
            "createdBy": created_by,
            "timestamp": datetime.now(timezone.utc),
        })
        logger.info(f"Blog post {post_id} created by {created_by}")
        return post_id

    async def update_post(self, post_id: str, post_data: BlogUpdate, updated_by: str) -> None:
        await self._update(post_id, {
            **post_data.model_dump(by_alias=True),
            "updatedBy": updated_by,
            "updatedAt": datetime.now(timezone.utc),
        })

    async def delete_post(self, post_id: str) -> None:
        await self.get_post(post_id, include_drafts=True)
        await self.store.delete(BLOG_COLLECTION, post_id)
        logger.info(f"Blog post {post_id} deleted")

    async def _update(self, post_id: str, update_data: Dict[str, Any]) -> None:
        try:
            await self.store.update(BLOG_COLLECTION, post_id, update_data)
        except DocumentNotFound:
            raise NotFound("Blog post not found")
