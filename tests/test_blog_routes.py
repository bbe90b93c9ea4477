import asyncio
import unittest
from datetime import datetime, timedelta, timezone

from app.config.permissions_config import Role
from app.modules.blog.models import BLOG_COLLECTION
from testing_utils import API, auth_headers, fresh_client, memory_store, seed_documents, seed_user

BASE = datetime(2024, 6, 1, tzinfo=timezone.utc)


def seed_post(doc_id, minutes, **fields):
    data = {
        "title": "Untitled",
        "content": "",
        "author": "staff",
        "tags": [],
        "isPublished": True,
        "timestamp": BASE + timedelta(minutes=minutes),
        **fields,
    }
    asyncio.run(memory_store().set(BLOG_COLLECTION, doc_id, data))


class BlogListingTests(unittest.TestCase):
    def setUp(self):
        self.client = fresh_client()

    def test_search_docker_only_published_matches(self):
        seed_post("p1", 1, title="Docker in production")
        seed_post("p2", 2, content="we run everything in docker swarm")
        seed_post("p3", 3, author="Docker Captain")
        seed_post("p4", 4, category="DOCKER")
        seed_post("p5", 5, title="Kubernetes basics")
        seed_post("p6", 6, title="Docker draft", isPublished=False)
        response = self.client.get(f"{API}/blog", params={"search": "docker"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual([b["id"] for b in response.json()["blogs"]], ["p4", "p3", "p2", "p1"])

    def test_cursor_pages_never_repeat(self):
        seed_documents(BLOG_COLLECTION, 25, title="Post", content="c", author="a", isPublished=True)
        first = self.client.get(f"{API}/blog", params={"limit": 10}).json()
        self.assertEqual(len(first["blogs"]), 10)
        self.assertTrue(first["pagination"]["hasNextPage"])
        token = first["pagination"]["nextPageToken"]

        second = self.client.get(f"{API}/blog", params={"limit": 10, "pageToken": token}).json()
        first_ids = {b["id"] for b in first["blogs"]}
        self.assertFalse(first_ids & {b["id"] for b in second["blogs"]})

        third = self.client.get(
            f"{API}/blog", params={"limit": 10, "pageToken": second["pagination"]["nextPageToken"]}
        ).json()
        self.assertEqual(len(third["blogs"]), 5)
        self.assertIsNone(third["pagination"]["nextPageToken"])
        self.assertFalse(third["pagination"]["hasNextPage"])

    def test_public_listing_hides_drafts_and_rejects_draft_filter(self):
        seed_post("live", 1)
        seed_post("draft", 2, isPublished=False)
        response = self.client.get(f"{API}/blog")
        self.assertEqual([b["id"] for b in response.json()["blogs"]], ["live"])
        self.assertEqual(self.client.get(f"{API}/blog", params={"isPublished": "false"}).status_code, 400)

    def test_offset_parameter_rejected(self):
        self.assertEqual(self.client.get(f"{API}/blog", params={"page": 2}).status_code, 400)

    def test_token_reused_with_other_filter(self):
        for i in range(4):
            seed_post(f"p{i}", i, category="devops")
        first = self.client.get(f"{API}/blog", params={"limit": 2, "category": "devops"}).json()
        response = self.client.get(
            f"{API}/blog", params={"limit": 2, "category": "cloud", "pageToken": first["pagination"]["nextPageToken"]}
        )
        self.assertEqual(response.status_code, 400)

    def test_tag_and_author_filters(self):
        seed_post("p1", 1, tags=["python", "web"], author="ann")
        seed_post("p2", 2, tags=["go"], author="bob")
        response = self.client.get(f"{API}/blog", params={"tags": "web,rust"})
        self.assertEqual([b["id"] for b in response.json()["blogs"]], ["p1"])
        response = self.client.get(f"{API}/blog", params={"author": "bob"})
        self.assertEqual([b["id"] for b in response.json()["blogs"]], ["p2"])

    def test_unpublished_post_is_not_found_publicly(self):
        seed_post("draft", 1, isPublished=False)
        self.assertEqual(self.client.get(f"{API}/blog/draft").status_code, 404)
        self.assertEqual(self.client.get(f"{API}/blog/nothing").status_code, 404)


class BlogAdminTests(unittest.TestCase):
    def setUp(self):
        self.client = fresh_client()
        seed_user("editor@example.com", Role.EDITOR)
        seed_user("admin@example.com", Role.ADMIN)
        self.editor = auth_headers("editor@example.com", "editor")
        self.admin = auth_headers("admin@example.com", "admin")

    def test_admin_listing_includes_drafts(self):
        seed_post("live", 1)
        seed_post("draft", 2, isPublished=False)
        response = self.client.get(f"{API}/blog/admin", headers=self.editor)
        self.assertEqual([b["id"] for b in response.json()["blogs"]], ["draft", "live"])
        response = self.client.get(f"{API}/blog/admin", params={"isPublished": "false"}, headers=self.editor)
        self.assertEqual([b["id"] for b in response.json()["blogs"]], ["draft"])
        self.assertEqual(self.client.get(f"{API}/blog/admin/draft", headers=self.editor).status_code, 200)

    def test_create_update_delete(self):
        response = self.client.post(
            f"{API}/blog",
            json={"title": "Hello", "content": "World", "author": "Ed", "seo": {"metaTitle": "Hello"}},
            headers=self.editor,
        )
        self.assertEqual(response.status_code, 201)
        post_id = response.json()["id"]

        # drafts by default
        self.assertEqual(self.client.get(f"{API}/blog/{post_id}").status_code, 404)
        stored = asyncio.run(memory_store().get(BLOG_COLLECTION, post_id)).data
        self.assertEqual(stored["createdBy"], "editor@example.com")
        self.assertEqual(stored["seo"], {"metaTitle": "Hello"})

        response = self.client.put(
            f"{API}/blog/{post_id}",
            json={"title": "Hello", "content": "World", "author": "Ed", "isPublished": True},
            headers=self.editor,
        )
        self.assertEqual(response.status_code, 200)
        public = self.client.get(f"{API}/blog/{post_id}").json()
        self.assertTrue(public["isPublished"])
        self.assertEqual(public["timestamp"], self.client.get(f"{API}/blog/admin/{post_id}", headers=self.editor).json()["timestamp"])
        updated = asyncio.run(memory_store().get(BLOG_COLLECTION, post_id)).data
        self.assertEqual(updated["timestamp"], stored["timestamp"])

        self.assertEqual(self.client.delete(f"{API}/blog/{post_id}", headers=self.editor).status_code, 403)
        self.assertEqual(self.client.delete(f"{API}/blog/{post_id}", headers=self.admin).status_code, 200)
        self.assertEqual(self.client.delete(f"{API}/blog/{post_id}", headers=self.admin).status_code, 404)

    def test_create_validation(self):
        response = self.client.post(f"{API}/blog", json={"title": "", "content": "c", "author": "a"}, headers=self.editor)
        self.assertEqual(response.status_code, 400)

    def test_update_missing_post(self):
        response = self.client.put(
            f"{API}/blog/missing", json={"title": "t", "content": "c", "author": "a"}, headers=self.editor
        )
        self.assertEqual(response.status_code, 404)


if __name__ == "__main__":
    unittest.main()
