from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional
import logging

from app.config.permissions_config import Role
from app.core.errors import NotFound, ValidationError
from app.core.pagination import (
    FilterField,
    FilterKind,
    Listing,
    PaginationStrategy,
    paginate,
    parse_list_params,
)
from app.core.security import hash_password
from app.database.document_store import DocumentNotFound, DocumentStore
from app.modules.users.models import USERS_COLLECTION
from app.modules.users.schemas import UserListResponse, UserResponse

logger = logging.getLogger(__name__)

USER_LISTING = Listing(
    collection=USERS_COLLECTION,
    strategy=PaginationStrategy.OFFSET,
    filters=(
        FilterField("role"),
        FilterField("isActive", FilterKind.BOOLEAN),
    ),
    search_fields=("name", "email", "phone"),
    order_field="createdAt",
)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    def __init__(self, store: DocumentStore):
        self.store = store

    async def get_user_record(self, uid: str) -> Optional[Dict[str, Any]]:
        """Raw stored record (password hash included); None when absent"""
        doc = await self.store.get(USERS_COLLECTION, normalize_email(uid))
        return doc.data if doc else None

    async def get_user(self, uid: str) -> UserResponse:
        record = await self.get_user_record(uid)
        if record is None:
            raise NotFound("User not found")
        return UserResponse.model_validate({"uid": normalize_email(uid), **record})

    async def create_user(
        self,
        *,
        name: str,
        phone: str,
        email: str,
        password: str,
        role: Role = Role.USER,
        created_by: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create a user document keyed by e-mail; existing e-mail is rejected"""
        uid = normalize_email(email)
        if await self.store.get(USERS_COLLECTION, uid) is not None:
            raise ValidationError("User already exists")

        now = datetime.now(timezone.utc)
        user_data = {
            "uid": uid,
            "name": name,
            "phone": phone,
            "email": uid,
            "password": hash_password(password),
            "role": role.value,
            "isActive": True,
            "createdAt": now,
            "updatedAt": now,
        }
        if created_by:
            user_data["createdBy"] = created_by

        await self.store.set(USERS_COLLECTION, uid, user_data)
        logger.info(f"Created user {uid} with role {role.value}")
        return user_data

    async def update_profile(self, uid: str, name: Optional[str], phone: Optional[str]) -> UserResponse:
        update_data: Dict[str, Any] = {"updatedAt": datetime.now(timezone.utc)}
        if name:
            update_data["name"] = name
        if phone:
            update_data["phone"] = phone
        await self._update(uid, update_data)
        return await self.get_user(uid)

    async def update_role(self, uid: str, role: Role, updated_by: str) -> UserResponse:
        await self._update(uid, {
            "role": role.value,
            "updatedAt": datetime.now(timezone.utc),
            "updatedBy": updated_by,
        })
        logger.info(f"{updated_by} set role of {uid} to {role.value}")
        return await self.get_user(uid)

    async def set_active(self, uid: str, is_active: bool, updated_by: str) -> UserResponse:
        if normalize_email(uid) == normalize_email(updated_by) and not is_active:
            raise ValidationError("You cannot disable your own account")
        await self._update(uid, {
            "isActive": is_active,
            "updatedAt": datetime.now(timezone.utc),
            "updatedBy": updated_by,
        })
        logger.info(f"{updated_by} {'enabled' if is_active else 'disabled'} account {uid}")
        return await self.get_user(uid)

    async def record_login(self, uid: str) -> None:
        await self._update(uid, {"lastLoginAt": datetime.now(timezone.utc)})

    async def list_users(self, query_params: Mapping[str, str]) -> UserListResponse:
        params = parse_list_params(USER_LISTING, query_params)
        page = await paginate(self.store, USER_LISTING, params)
        return UserListResponse(
            users=[UserResponse.model_validate({"uid": item["id"], **item}) for item in page.items],
            pagination=page.pagination,
        )

    async def _update(self, uid: str, update_data: Dict[str, Any]) -> None:
        try:
            await self.store.update(USERS_COLLECTION, normalize_email(uid), update_data)
        except DocumentNotFound:
            raise NotFound("User not found")
