from fastapi import APIRouter, Depends, Request, Response
from typing import Dict

from app.config import settings
from app.config.permissions_config import Permission, expand_permissions, get_permission_matrix
from app.core.dependencies import authenticate, authenticate_firebase, require_permission
from app.core.rate_limit import limiter
from app.core.schemas import MessageResponse
from app.database.document_store import DocumentStore
from app.database.store_client import get_store
from app.modules.auth.schemas import (
    CreateUserRequest, CurrentUser, LoginRequest, MeResponse, ProfileUpdate,
    RegisterRequest, TokenResponse
)
from app.modules.auth.service import AuthService, clear_session, issue_session
from app.modules.users.schemas import UserResponse, UserRoleUpdate
from app.modules.users.service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(store: DocumentStore = Depends(get_store)) -> AuthService:
    return AuthService(store)


def get_user_service(store: DocumentStore = Depends(get_store)) -> UserService:
    return UserService(store)


@router.post("/create", response_model=TokenResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user and start a session"""
    user_data = await service.register(register_data)
    return issue_session(user_data, response)


@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.login_rate_limit)
async def login(
    request: Request,
    login_data: LoginRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get a session token (also set as an httpOnly cookie)"""
    user_data = await service.login(login_data)
    return issue_session(user_data, response)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    clear_session(response)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=MeResponse)
async def get_current_user(
    current_user: CurrentUser = Depends(authenticate),
    service: UserService = Depends(get_user_service)
):
    """Get current authenticated user and their permissions (for frontend UI)."""
    user = await service.get_user(current_user.uid)
    return MeResponse(user=user, permissions=expand_permissions(current_user.role))


@router.get("/firebase/me", response_model=MeResponse)
async def get_current_firebase_user(
    current_user: CurrentUser = Depends(authenticate_firebase),
    service: UserService = Depends(get_user_service)
):
    """Same as /me for callers holding a Firebase ID token"""
    user = await service.get_user(current_user.uid)
    return MeResponse(user=user, permissions=expand_permissions(current_user.role))


@router.patch("/profile", response_model=UserResponse)
async def update_profile(
    profile: ProfileUpdate,
    current_user: CurrentUser = Depends(authenticate),
    service: UserService = Depends(get_user_service)
):
    return await service.update_profile(current_user.uid, profile.name, profile.phone)


@router.get("/permissions")
async def get_permissions(current_user: CurrentUser = Depends(authenticate)) -> Dict:
    """Static role/permission matrix"""
    return get_permission_matrix()


@router.post("/create-user", response_model=UserResponse, status_code=201)
async def create_user(
    user_data: CreateUserRequest,
    current_user: CurrentUser = Depends(require_permission(Permission.USERS_CREATE)),
    service: AuthService = Depends(get_auth_service)
):
    """Create an account with an explicit role (requires users:create)"""
    created = await service.create_user(user_data, created_by=current_user.uid)
    return UserResponse.model_validate(created)


@router.patch("/update-role/{uid}", response_model=UserResponse)
async def update_role(
    uid: str,
    body: UserRoleUpdate,
    current_user: CurrentUser = Depends(require_permission(Permission.USERS_UPDATE)),
    service: UserService = Depends(get_user_service)
):
    return await service.update_role(uid, body.role, updated_by=current_user.uid)
