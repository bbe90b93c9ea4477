from fastapi import APIRouter, Depends, Request

from app.config.permissions_config import Permission
from app.core.dependencies import require_permission
from app.database.document_store import DocumentStore
from app.database.store_client import get_store
from app.modules.auth.schemas import CurrentUser
from app.modules.users.schemas import UserListResponse, UserResponse, UserStatusUpdate
from app.modules.users.service import UserService

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(store: DocumentStore = Depends(get_store)) -> UserService:
    return UserService(store)


@router.get("", response_model=UserListResponse)
async def list_users(
    request: Request,
    current_user: CurrentUser = Depends(require_permission(Permission.USERS_READ)),
    service: UserService = Depends(get_user_service)
):
    """List users (filters: role, isActive; search: name, email, phone)"""
    return await service.list_users(request.query_params)


@router.get("/{uid}", response_model=UserResponse)
async def get_user(
    uid: str,
    current_user: CurrentUser = Depends(require_permission(Permission.USERS_READ)),
    service: UserService = Depends(get_user_service)
):
    return await service.get_user(uid)


@router.patch("/{uid}/status", response_model=UserResponse)
async def update_user_status(
    uid: str,
    body: UserStatusUpdate,
    current_user: CurrentUser = Depends(require_permission(Permission.USERS_UPDATE)),
    service: UserService = Depends(get_user_service)
):
    """Enable or disable an account; disabled accounts fail authentication"""
    return await service.set_active(uid, body.is_active, current_user.uid)
