import json
import logging
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import auth, credentials, firestore_async

from app.config import settings

logger = logging.getLogger(__name__)


def _load_service_account(raw: str) -> Dict[str, Any]:
    service_account = json.loads(raw)
    # Private keys pasted into env vars usually arrive with escaped newlines
    private_key = service_account.get("private_key")
    if private_key and "\\n" in private_key:
        service_account["private_key"] = private_key.replace("\\n", "\n")
    return service_account


class FirebaseClient:
    _app: Optional[firebase_admin.App] = None
    _firestore = None

    @classmethod
    def get_app(cls) -> firebase_admin.App:
        if cls._app is None:
            try:
                cls._app = firebase_admin.get_app()
            except ValueError:
                cls._app = cls._initialize_app()
        return cls._app

    @classmethod
    def _initialize_app(cls) -> firebase_admin.App:
        if not settings.firebase_service_account:
            raise RuntimeError("FIREBASE_SERVICE_ACCOUNT environment variable is missing")
        service_account = _load_service_account(settings.firebase_service_account)
        project_id = settings.firebase_project_id or service_account.get("project_id")
        logger.info(f"Initializing Firebase Admin for project {project_id}")
        return firebase_admin.initialize_app(
            credentials.Certificate(service_account),
            {"projectId": project_id},
        )

    @classmethod
    def get_firestore(cls):
        """Async Firestore client shared by all requests."""
        if cls._firestore is None:
            cls._firestore = firestore_async.client(app=cls.get_app())
        return cls._firestore


def verify_firebase_id_token(token: str) -> Dict[str, Any]:
    """Verify an ID token issued by Firebase Authentication (blocking call)."""
    return auth.verify_id_token(token, app=FirebaseClient.get_app())
