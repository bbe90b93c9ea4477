# Firestore collection: blogs
# This file documents the expected document shape
# Actual operations are handled via the document store in service.py

"""
Expected document structure (auto-generated id):
- title: string (not null)
- content: string (not null)
- author: string (not null)
- category: string (nullable)
- tags: array<string> (default: [])
- image: string (nullable) - cover image URL
- seo: map (default: {}) - free-form metadata (metaTitle, metaDescription, ...)
- isPublished: boolean (default: false) - drafts are hidden from public listing
- timestamp: timestamp - creation time, listing sort key
- createdBy: string
- updatedBy: string (nullable)
- updatedAt: timestamp (nullable)
"""

BLOG_COLLECTION = "blogs"
