# Firestore collection: users
# This file documents the expected document shape
# Actual operations are handled via the document store in service.py

"""
Expected document structure (document id = lower-cased e-mail):
- uid: string (same as the document id)
- email: string (unique, immutable)
- name: string
- phone: string
- password: string (bcrypt hash, never returned)
- role: string (super_admin | admin | editor | user)
- isActive: bool (default: true)
- createdAt: timestamp
- updatedAt: timestamp
- createdBy: string (nullable) - identity of the admin who created the account
- updatedBy: string (nullable)
- lastLoginAt: timestamp (nullable)
"""

USERS_COLLECTION = "users"
