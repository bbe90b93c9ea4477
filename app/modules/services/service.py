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
from app.database.document_store import DocumentNotFound, DocumentStore
from app.modules.services.models import SERVICES_COLLECTION
from app.modules.services.schemas import (
    ServiceCreate, ServiceListResponse, ServiceResponse, ServiceUpdate
)

logger = logging.getLogger(__name__)

SERVICE_LISTING = Listing(
    collection=SERVICES_COLLECTION,
    strategy=PaginationStrategy.OFFSET,
    filters=(
        FilterField("category"),
        FilterField("tags", FilterKind.ANY_OF),
    ),
    search_fields=("name", "shortDescription", "category"),
)


class CatalogService:
    def __init__(self, store: DocumentStore):
        self.store = store

    async def list_services(self, query_params: Mapping[str, str]) -> ServiceListResponse:
        """Services ordered newest first (filters: category, tags; search: name, shortDescription, category)"""
        params = parse_list_params(SERVICE_LISTING, query_params)
        page = await paginate(self.store, SERVICE_LISTING, params)
        return ServiceListResponse(
            services=[ServiceResponse.model_validate(item) for item in page.items],
            pagination=page.pagination,
        )

    async def get_service(self, service_id: str) -> ServiceResponse:
        doc = await self.store.get(SERVICES_COLLECTION, service_id)
        if doc is None:
            raise NotFound("Service not found")
        return ServiceResponse.model_validate(doc.to_dict())

    async def create_service(self, service_data: ServiceCreate, created_by: str) -> str:
        service_id = await self.store.add(SERVICES_COLLECTION, {
            **service_data.model_dump(by_alias=True),
            "createdBy": created_by,
            "timestamp": datetime.now(timezone.utc),
        })
        logger.info(f"Service {service_id} created by {created_by}")
        return service_id

    async def update_service(self, service_id: str, service_data: ServiceUpdate, updated_by: str) -> None:
        await self._update(service_id, {
            **service_data.model_dump(by_alias=True),
            "updatedBy": updated_by,
            "updatedAt": datetime.now(timezone.utc),
        })

    async def delete_service(self, service_id: str) -> None:
        await self.get_service(service_id)
        await self.store.delete(SERVICES_COLLECTION, service_id)
        logger.info(f"Service {service_id} deleted")

    async def _update(self, service_id: str, update_data: Dict[str, Any]) -> None:
        try:
            await self.store.update(SERVICES_COLLECTION, service_id, update_data)
        except DocumentNotFound:
            raise NotFound("Service not found")
