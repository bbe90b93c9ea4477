# Firestore collection: services
# This file documents the expected document shape
# Actual operations are handled via the document store in service.py

"""
Expected document structure (auto-generated id):
- name: string (not null)
- category: string (not null)
- shortDescription: string (not null)
- longDescription: string (not null)
- image: string (nullable) - image URL
- tags: array<string> (default: [])
- timestamp: timestamp - creation time, listing sort key
- createdBy: string - identity of the creator
- updatedBy: string (nullable)
- updatedAt: timestamp (nullable)
"""

SERVICES_COLLECTION = "services"
