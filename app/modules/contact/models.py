# Firestore collection: contacts
# This file documents the expected document shape
# Actual operations are handled via the document store in service.py

"""
Expected document structure (auto-generated id):
- name: string (not null)
- phoneNumber: string (not null)
- email: string (not null)
- message: string (nullable)
- status: string - pending, in_progress, resolved, closed (default: pending)
- timestamp: timestamp - submission time, listing sort key
- submittedBy: string (nullable) - identity of a signed-in submitter
- updatedBy: string (nullable)
- updatedAt: timestamp (nullable)
"""

CONTACTS_COLLECTION = "contacts"
