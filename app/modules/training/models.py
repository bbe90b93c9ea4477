# Firestore collection: training
# This file documents the expected document shape
# Actual operations are handled via the document store in service.py

"""
Expected document structure (auto-generated id):
- title: string (not null)
- description: string (nullable)
- ytLink: string (not null) - https://www.youtube.com/watch?v=<id>
- seo: map (default: {})
- category: string (nullable)
- level: string (nullable) - beginner, intermediate, advanced
- duration: string | number (nullable)
- isActive: boolean (default: true) - inactive items are hidden from public routes
- timestamp: timestamp - creation time, listing sort key
- createdBy / updatedBy: string
- updatedAt: timestamp (nullable)
- deactivatedAt / reactivatedAt: timestamp (nullable) - set by the status toggle
- deletedBy / deletedAt: set by soft delete
"""

TRAINING_COLLECTION = "training"
