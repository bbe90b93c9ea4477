import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from fastapi.testclient import TestClient

from app.config.permissions_config import Role
from app.core.security import create_session_token, hash_password
from app.database.document_store import InMemoryDocumentStore
from app.database.store_client import get_store
from app.main import create_app
from app.modules.users.models import USERS_COLLECTION

PASSWORD = "Sup3r-secret!"
# bcrypt at 12 rounds is slow; hash once per test run
PASSWORD_HASH = hash_password(PASSWORD)

API = "/v1"


def memory_store() -> InMemoryDocumentStore:
    store = get_store()
    assert isinstance(store, InMemoryDocumentStore)
    return store


def fresh_client(**kwargs) -> TestClient:
    memory_store().reset()
    return TestClient(create_app(), **kwargs)


def seed_user(email: str, role: Role = Role.USER, is_active: bool = True, **extra: Any) -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    uid = email.lower()
    data = {
        "uid": uid,
        "email": uid,
        "name": extra.pop("name", uid.split("@")[0]),
        "phone": extra.pop("phone", "+1 555 010 0000"),
        "password": PASSWORD_HASH,
        "role": role.value if isinstance(role, Role) else role,
        "isActive": is_active,
        "createdAt": now,
        "updatedAt": now,
        **extra,
    }
    asyncio.run(memory_store().set(USERS_COLLECTION, uid, data))
    return data


def auth_headers(email: str, role: str = "user") -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_session_token(email, role)}"}


def seed_documents(collection: str, count: int, **fields: Any) -> list:
    """Insert `count` documents with strictly decreasing timestamps; returns ids newest first."""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    ids = []
    for i in range(count):
        doc_id = f"{collection}-{i:03d}"
        data = {"timestamp": base + timedelta(minutes=count - i), **fields}
        asyncio.run(memory_store().set(collection, doc_id, data))
        ids.append(doc_id)
    return ids
