from fastapi import APIRouter, Depends, Request

from app.config.permissions_config import Permission
from app.core.dependencies import require_permission
from app.core.schemas import CreatedResponse, MessageResponse
from app.database.document_store import DocumentStore
from app.database.store_client import get_store
from app.modules.auth.schemas import CurrentUser
from app.modules.training.schemas import (
    TrainingCreate, TrainingListResponse, TrainingResponse, TrainingStatusUpdate, TrainingUpdate
)
from app.modules.training.service import TrainingService

router = APIRouter(prefix="/training", tags=["training"])


def get_training_service(store: DocumentStore = Depends(get_store)) -> TrainingService:
    return TrainingService(store)


@router.get("", response_model=TrainingListResponse)
async def list_active_training(
    request: Request,
    service: TrainingService = Depends(get_training_service)
):
    """Active training content (filters: category, level; search: title, description, category, level)"""
    return await service.list_active(request.query_params)


@router.get("/admin", response_model=TrainingListResponse)
async def list_all_training(
    request: Request,
    current_user: CurrentUser = Depends(require_permission(Permission.TRAINING_READ)),
    service: TrainingService = Depends(get_training_service)
):
    """All training content including inactive (extra filter: isActive)"""
    return await service.list_all(request.query_params)


@router.get("/admin/{training_id}", response_model=TrainingResponse)
async def get_any_training(
    training_id: str,
    current_user: CurrentUser = Depends(require_permission(Permission.TRAINING_READ)),
    service: TrainingService = Depends(get_training_service)
):
    return await service.get_training(training_id, include_inactive=True)


@router.get("/category/{category}", response_model=TrainingListResponse)
async def list_training_by_category(
    category: str,
    request: Request,
    service: TrainingService = Depends(get_training_service)
):
    return await service.list_by_category(category, request.query_params)


@router.get("/level/{level}", response_model=TrainingListResponse)
async def list_training_by_level(
    level: str,
    request: Request,
    service: TrainingService = Depends(get_training_service)
):
    return await service.list_by_level(level, request.query_params)


@router.get("/{training_id}", response_model=TrainingResponse)
async def get_training(
    training_id: str,
    service: TrainingService = Depends(get_training_service)
):
    return await service.get_training(training_id)


@router.post("", response_model=CreatedResponse, status_code=201)
async def create_training(
    training_data: TrainingCreate,
    current_user: CurrentUser = Depends(require_permission(Permission.TRAINING_CREATE)),
    service: TrainingService = Depends(get_training_service)
):
    training_id = await service.create_training(training_data, current_user.uid)
    return {"id": training_id, "message": "Training content created successfully"}


@router.put("/{training_id}", response_model=MessageResponse)
async def update_training(
    training_id: str,
    training_data: TrainingUpdate,
    current_user: CurrentUser = Depends(require_permission(Permission.TRAINING_UPDATE)),
    service: TrainingService = Depends(get_training_service)
):
    await service.update_training(training_id, training_data, current_user.uid)
    return {"message": "Training content updated successfully"}


@router.patch("/{training_id}/status", response_model=MessageResponse)
async def update_training_status(
    training_id: str,
    body: TrainingStatusUpdate,
    current_user: CurrentUser = Depends(require_permission(Permission.TRAINING_UPDATE)),
    service: TrainingService = Depends(get_training_service)
):
    await service.set_active(training_id, body.is_active, current_user.uid)
    state = "activated" if body.is_active else "deactivated"
    return {"message": f"Training content {state} successfully"}


@router.delete("/{training_id}", response_model=MessageResponse)
async def delete_training(
    training_id: str,
    current_user: CurrentUser = Depends(require_permission(Permission.TRAINING_DELETE)),
    service: TrainingService = Depends(get_training_service)
):
    """Soft delete: marks the item inactive"""
    await service.soft_delete(training_id, current_user.uid)
    return {"message": "Training content deleted successfully"}


@router.delete("/{training_id}/permanent", response_model=MessageResponse)
async def delete_training_permanently(
    training_id: str,
    current_user: CurrentUser = Depends(require_permission(Permission.TRAINING_DELETE)),
    service: TrainingService = Depends(get_training_service)
):
    await service.delete_permanently(training_id, current_user.uid)
    return {"message": "Training content permanently deleted"}
