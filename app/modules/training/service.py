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
from app.database.document_store import EQUALS, Document, DocumentNotFound, DocumentStore, FieldFilter
from app.modules.training.models import TRAINING_COLLECTION
from app.modules.training.schemas import (
    TrainingCreate, TrainingListResponse, TrainingResponse, TrainingUpdate
)

logger = logging.getLogger(__name__)

ADMIN_TRAINING_LISTING = Listing(
    collection=TRAINING_COLLECTION,
    strategy=PaginationStrategy.OFFSET,
    filters=(
        FilterField("category"),
        FilterField("level"),
        FilterField("isActive", FilterKind.BOOLEAN),
    ),
    search_fields=("title", "description", "category", "level"),
)

PUBLIC_TRAINING_LISTING = ADMIN_TRAINING_LISTING.with_fixed(FieldFilter("isActive", EQUALS, True))


class TrainingService:
    def __init__(self, store: DocumentStore):
        self.store = store

    async def _list(self, listing: Listing, query_params: Mapping[str, str], **extra: Any) -> TrainingListResponse:
        params = parse_list_params(listing, query_params)
        page = await paginate(self.store, listing, params)
        return TrainingListResponse(
            trainings=[TrainingResponse.model_validate(item) for item in page.items],
            pagination=page.pagination,
            **extra,
        )

    async def list_active(self, query_params: Mapping[str, str]) -> TrainingListResponse:
        return await self._list(PUBLIC_TRAINING_LISTING, query_params)

    async def list_all(self, query_params: Mapping[str, str]) -> TrainingListResponse:
        return await self._list(ADMIN_TRAINING_LISTING, query_params)

    async def list_by_category(self, category: str, query_params: Mapping[str, str]) -> TrainingListResponse:
        listing = PUBLIC_TRAINING_LISTING.with_fixed(FieldFilter("category", EQUALS, category))
        return await self._list(listing, query_params, category=category)

    async def list_by_level(self, level: str, query_params: Mapping[str, str]) -> TrainingListResponse:
        listing = PUBLIC_TRAINING_LISTING.with_fixed(FieldFilter("level", EQUALS, level))
        return await self._list(listing, query_params, level=level)

    async def _get_document(self, training_id: str) -> Document:
        doc = await self.store.get(TRAINING_COLLECTION, training_id)
        if doc is None:
            raise NotFound("Training not found")
        return doc

    async def get_training(self, training_id: str, include_inactive: bool = False) -> TrainingResponse:
        doc = await self._get_document(training_id)
        if not include_inactive and doc.data.get("isActive") is not True:
            raise NotFound("Training not found")
        return TrainingResponse.model_validate(doc.to_dict())

    async def create_training(self, training_data: TrainingCreate, created_by: str) -> str:
        training_id = await self.store.add(TRAINING_COLLECTION, {
            **training_data.model_dump(by_alias=True),
            "createdBy": created_by,
            "timestamp": datetime.now(timezone.utc),
        })
        logger.info(f"Training {training_id} created by {created_by}")
        return training_id

    async def update_training(self, training_id: str, training_data: TrainingUpdate, updated_by: str) -> None:
        await self._update(training_id, {
            **training_data.model_dump(by_alias=True),
            "updatedBy": updated_by,
            "updatedAt": datetime.now(timezone.utc),
        })

    async def set_active(self, training_id: str, is_active: bool, updated_by: str) -> None:
        now = datetime.now(timezone.utc)
        update_data: Dict[str, Any] = {
            "isActive": is_active,
            "updatedBy": updated_by,
            "updatedAt": now,
        }
        if is_active:
            update_data["reactivatedAt"] = now
        else:
            update_data["deactivatedAt"] = now
        await self._update(training_id, update_data)

    async def soft_delete(self, training_id: str, deleted_by: str) -> None:
        """Hide the item from public routes; it stays visible to admins"""
        await self._update(training_id, {
            "isActive": False,
            "deletedBy": deleted_by,
            "deletedAt": datetime.now(timezone.utc),
        })
        logger.info(f"Training {training_id} soft-deleted by {deleted_by}")

    async def delete_permanently(self, training_id: str, deleted_by: str) -> None:
        await self._get_document(training_id)
        await self.store.delete(TRAINING_COLLECTION, training_id)
        logger.warning(f"Training {training_id} permanently deleted by {deleted_by}")

    async def _update(self, training_id: str, update_data: Dict[str, Any]) -> None:
        try:
            await self.store.update(TRAINING_COLLECTION, training_id, update_data)
        except DocumentNotFound:
            raise NotFound("Training not found")
