from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional
import logging

from app.core.errors import NotFound
from app.core.pagination import (
    FilterField,
    Listing,
    PaginationStrategy,
    paginate,
    parse_list_params,
)
from app.database.document_store import DocumentNotFound, DocumentStore
from app.modules.contact.models import CONTACTS_COLLECTION
from app.modules.contact.schemas import (
    ContactCreate, ContactListResponse, ContactResponse, ContactStatus
)

logger = logging.getLogger(__name__)

CONTACT_LISTING = Listing(
    collection=CONTACTS_COLLECTION,
    strategy=PaginationStrategy.OFFSET,
    filters=(FilterField("status"),),
    search_fields=("name", "email", "phoneNumber", "message"),
)


class ContactService:
    def __init__(self, store: DocumentStore):
        self.store = store

    async def submit(self, contact_data: ContactCreate, submitted_by: Optional[str] = None) -> str:
        document = {
            **contact_data.model_dump(by_alias=True),
            "status": ContactStatus.PENDING.value,
            "timestamp": datetime.now(timezone.utc),
        }
        if submitted_by:
            document["submittedBy"] = submitted_by
        contact_id = await self.store.add(CONTACTS_COLLECTION, document)
        logger.info(f"Contact submission {contact_id} received")
        return contact_id

    async def list_contacts(self, query_params: Mapping[str, str]) -> ContactListResponse:
        params = parse_list_params(CONTACT_LISTING, query_params)
        page = await paginate(self.store, CONTACT_LISTING, params)
        return ContactListResponse(
            contacts=[ContactResponse.model_validate(item) for item in page.items],
            pagination=page.pagination,
        )

    async def get_contact(self, contact_id: str) -> ContactResponse:
        doc = await self.store.get(CONTACTS_COLLECTION, contact_id)
        if doc is None:
            raise NotFound("Contact not found")
        return ContactResponse.model_validate(doc.to_dict())

    async def update_status(self, contact_id: str, status: ContactStatus, updated_by: str) -> None:
        await self._update(contact_id, {
            "status": status.value,
            "updatedBy": updated_by,
            "updatedAt": datetime.now(timezone.utc),
        })

    async def delete_contact(self, contact_id: str) -> None:
        await self.get_contact(contact_id)
        await self.store.delete(CONTACTS_COLLECTION, contact_id)

    async def _update(self, contact_id: str, update_data: Dict[str, Any]) -> None:
        try:
            await self.store.update(CONTACTS_COLLECTION, contact_id, update_data)
        except DocumentNotFound:
            raise NotFound("Contact not found")
