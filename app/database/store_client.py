from app.config import settings
from app.database.document_store import DocumentStore, InMemoryDocumentStore


class StoreClient:
    _store: DocumentStore = None

    @classmethod
    def get_store(cls) -> DocumentStore:
        if cls._store is None:
            if settings.use_in_memory_backends:
                cls._store = InMemoryDocumentStore()
            else:
                # Imported lazily so in-memory runs never touch firebase_admin
                from app.database.firebase_client import FirebaseClient
                from app.database.firestore_store import FirestoreDocumentStore

                cls._store = FirestoreDocumentStore(
                    FirebaseClient.get_firestore(),
                    timeout_seconds=settings.store_timeout_seconds,
                )
        return cls._store


def get_store() -> DocumentStore:
    return StoreClient.get_store()
