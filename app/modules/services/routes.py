from fastapi import APIRouter, Depends, Request

from app.config.permissions_config import Permission
from app.core.dependencies import require_permission
from app.core.schemas import CreatedResponse, MessageResponse
from app.database.document_store import DocumentStore
from app.database.store_client import get_store
from app.modules.auth.schemas import CurrentUser
from app.modules.services.schemas import (
    ServiceCreate, ServiceListResponse, ServiceResponse, ServiceUpdate
)
from app.modules.services.service import CatalogService

router = APIRouter(prefix="/services", tags=["services"])


def get_catalog_service(store: DocumentStore = Depends(get_store)) -> CatalogService:
    return CatalogService(store)


@router.get("", response_model=ServiceListResponse)
async def list_services(
    request: Request,
    service: CatalogService = Depends(get_catalog_service)
):
    """List services (public)"""
    return await service.list_services(request.query_params)


@router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(
    service_id: str,
    service: CatalogService = Depends(get_catalog_service)
):
    """Get a single service (public)"""
    return await service.get_service(service_id)


@router.post("", response_model=CreatedResponse, status_code=201)
async def create_service(
    service_data: ServiceCreate,
    current_user: CurrentUser = Depends(require_permission(Permission.SERVICES_CREATE)),
    service: CatalogService = Depends(get_catalog_service)
):
    service_id = await service.create_service(service_data, current_user.uid)
    return {"id": service_id, "message": "Service created successfully"}


@router.put("/{service_id}", response_model=MessageResponse)
async def update_service(
    service_id: str,
    service_data: ServiceUpdate,
    current_user: CurrentUser = Depends(require_permission(Permission.SERVICES_UPDATE)),
    service: CatalogService = Depends(get_catalog_service)
):
    await service.update_service(service_id, service_data, current_user.uid)
    return {"message": "Service updated successfully"}


@router.delete("/{service_id}", response_model=MessageResponse)
async def delete_service(
    service_id: str,
    current_user: CurrentUser = Depends(require_permission(Permission.SERVICES_DELETE)),
    service: CatalogService = Depends(get_catalog_service)
):
    await service.delete_service(service_id)
    return {"message": "Service deleted successfully"}
