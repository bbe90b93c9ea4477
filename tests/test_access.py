import asyncio
import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import jwt
from firebase_admin import auth as firebase_auth

from app.config import settings
from app.config.permissions_config import Role
from app.core.dependencies import get_firebase_verifier
from app.modules.contact.models import CONTACTS_COLLECTION
from testing_utils import API, auth_headers, fresh_client, memory_store, seed_user

PROTECTED_ROUTES = [
    ("get", f"{API}/auth/me"),
    ("get", f"{API}/auth/permissions"),
    ("get", f"{API}/users"),
    ("get", f"{API}/blog/admin"),
    ("get", f"{API}/training/admin"),
    ("get", f"{API}/contact"),
    ("delete", f"{API}/services/some-id"),
]


def expired_token(email):
    past = datetime.now(timezone.utc) - timedelta(hours=2)
    return jwt.encode(
        {"email": email, "role": "admin", "iat": past, "exp": past + timedelta(hours=1)},
        settings.jwt_secret,
        algorithm="HS256",
    )


class AccessTests(unittest.TestCase):
    def setUp(self):
        self.client = fresh_client()

    def tearDown(self):
        self.client.app.dependency_overrides.clear()

    def test_no_token(self):
        response = self.client.get(f"{API}/blog/admin")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "No token provided")
        self.assertEqual(response.headers["www-authenticate"], "Bearer")

    def test_expired_token(self):
        seed_user("admin@example.com", Role.ADMIN)
        response = self.client.get(
            f"{API}/blog/admin",
            headers={"Authorization": f"Bearer {expired_token('admin@example.com')}"},
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Token expired")

    def test_malformed_token(self):
        response = self.client.get(f"{API}/auth/me", headers={"Authorization": "Bearer nope.nope.nope"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Invalid token")

    def test_token_without_identity(self):
        token = jwt.encode(
            {"role": "admin", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            settings.jwt_secret,
            algorithm="HS256",
        )
        response = self.client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Invalid token payload (no uid/email)")

    def test_unknown_user(self):
        response = self.client.get(f"{API}/auth/me", headers=auth_headers("ghost@example.com", "admin"))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "User not found")

    def test_disabled_user_is_rejected_everywhere(self):
        seed_user("boss@example.com", Role.SUPER_ADMIN, is_active=False)
        headers = auth_headers("boss@example.com", "super_admin")
        for method, path in PROTECTED_ROUTES:
            response = getattr(self.client, method)(path, headers=headers)
            self.assertEqual(response.status_code, 401, path)
            self.assertEqual(response.json()["detail"], "User account is disabled", path)

    def test_user_role_cannot_create_blog_post(self):
        seed_user("reader@example.com", Role.USER)
        response = self.client.post(
            f"{API}/blog",
            json={"title": "T", "content": "C", "author": "A"},
            headers=auth_headers("reader@example.com"),
        )
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["detail"], "Insufficient permissions")

    def test_stored_role_wins_over_token_claim(self):
        seed_user("reader@example.com", Role.USER)
        response = self.client.post(
            f"{API}/blog",
            json={"title": "T", "content": "C", "author": "A"},
            headers=auth_headers("reader@example.com", "super_admin"),
        )
        self.assertEqual(response.status_code, 403)

    def test_identity_lookup_is_case_insensitive(self):
        seed_user("editor@example.com", Role.EDITOR)
        response = self.client.get(f"{API}/auth/me", headers=auth_headers("Editor@Example.com", "editor"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user"]["uid"], "editor@example.com")

    def test_cookie_fallback(self):
        seed_user("editor@example.com", Role.EDITOR)
        token = auth_headers("editor@example.com", "editor")["Authorization"].split(" ", 1)[1]
        response = self.client.get(f"{API}/blog/admin", headers={"Cookie": f"{settings.auth_cookie_name}={token}"})
        self.assertEqual(response.status_code, 200)

    def test_bearer_header_takes_precedence_over_cookie(self):
        seed_user("editor@example.com", Role.EDITOR)
        headers = {**auth_headers("editor@example.com", "editor"), "Cookie": f"{settings.auth_cookie_name}=garbage"}
        response = self.client.get(f"{API}/blog/admin", headers=headers)
        self.assertEqual(response.status_code, 200)

    def test_firebase_identity_path(self):
        seed_user("fb@example.com", Role.EDITOR)
        self.client.app.dependency_overrides[get_firebase_verifier] = lambda: (
            lambda token: {"uid": "firebase-uid", "email": "FB@example.com"}
        )
        response = self.client.get(f"{API}/auth/firebase/me", headers={"Authorization": "Bearer id-token"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["user"]["email"], "fb@example.com")
        self.assertIn("blog:update", body["permissions"])

    def test_firebase_expired_token(self):
        def verifier(token):
            raise firebase_auth.ExpiredIdTokenError("expired", None)

        self.client.app.dependency_overrides[get_firebase_verifier] = lambda: verifier
        response = self.client.get(f"{API}/auth/firebase/me", headers={"Authorization": "Bearer id-token"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Token expired")

    def test_firebase_invalid_token(self):
        def verifier(token):
            raise ValueError("bad token")

        self.client.app.dependency_overrides[get_firebase_verifier] = lambda: verifier
        response = self.client.get(f"{API}/auth/firebase/me", headers={"Authorization": "Bearer id-token"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Invalid Firebase token")

    def test_optional_auth_ignores_bad_token(self):
        response = self.client.post(
            f"{API}/contact",
            json={"name": "Ann", "phoneNumber": "+1 555 0100", "email": "ann@example.com"},
            headers={"Authorization": "Bearer broken"},
        )
        self.assertEqual(response.status_code, 201)
        doc = asyncio.run(memory_store().get(CONTACTS_COLLECTION, response.json()["id"]))
        self.assertNotIn("submittedBy", doc.data)

    def test_optional_auth_without_signing_secret(self):
        with patch.object(settings, "jwt_secret", ""):
            response = self.client.post(
                f"{API}/contact",
                json={"name": "Ann", "phoneNumber": "+1 555 0100", "email": "ann@example.com"},
                headers={"Authorization": "Bearer x"},
            )
        self.assertEqual(response.status_code, 201)
        doc = asyncio.run(memory_store().get(CONTACTS_COLLECTION, response.json()["id"]))
        self.assertNotIn("submittedBy", doc.data)

    def test_optional_auth_records_submitter(self):
        seed_user("member@example.com", Role.USER)
        response = self.client.post(
            f"{API}/contact",
            json={"name": "Ann", "phoneNumber": "+1 555 0100", "email": "ann@example.com"},
            headers=auth_headers("member@example.com"),
        )
        self.assertEqual(response.status_code, 201)
        doc = asyncio.run(memory_store().get(CONTACTS_COLLECTION, response.json()["id"]))
        self.assertEqual(doc.data["submittedBy"], "member@example.com")


if __name__ == "__main__":
    unittest.main()
