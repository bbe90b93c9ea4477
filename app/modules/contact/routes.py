from fastapi import APIRouter, Depends, Request
from typing import Optional

from app.config.permissions_config import Permission
from app.core.dependencies import optional_user, require_permission
from app.core.schemas import CreatedResponse, MessageResponse
from app.database.document_store import DocumentStore
from app.database.store_client import get_store
from app.modules.auth.schemas import CurrentUser
from app.modules.contact.schemas import (
    ContactCreate, ContactListResponse, ContactResponse, ContactStatusUpdate
)
from app.modules.contact.service import ContactService

router = APIRouter(prefix="/contact", tags=["contact"])


def get_contact_service(store: DocumentStore = Depends(get_store)) -> ContactService:
    return ContactService(store)


@router.post("", response_model=CreatedResponse, status_code=201)
async def submit_contact(
    contact_data: ContactCreate,
    current_user: Optional[CurrentUser] = Depends(optional_user),
    service: ContactService = Depends(get_contact_service)
):
    """Public contact form; a signed-in submitter is recorded as submittedBy"""
    contact_id = await service.submit(contact_data, current_user.uid if current_user else None)
    return {"id": contact_id, "message": "Contact form submitted successfully"}


@router.get("", response_model=ContactListResponse)
async def list_contacts(
    request: Request,
    current_user: CurrentUser = Depends(require_permission(Permission.CONTACT_READ)),
    service: ContactService = Depends(get_contact_service)
):
    """Submissions, newest first (filter: status; search: name, email, phoneNumber, message)"""
    return await service.list_contacts(request.query_params)


@router.get("/{contact_id}", response_model=ContactResponse)
async def get_contact(
    contact_id: str,
    current_user: CurrentUser = Depends(require_permission(Permission.CONTACT_READ)),
    service: ContactService = Depends(get_contact_service)
):
    return await service.get_contact(contact_id)


@router.patch("/{contact_id}/status", response_model=MessageResponse)
async def update_contact_status(
    contact_id: str,
    body: ContactStatusUpdate,
    current_user: CurrentUser = Depends(require_permission(Permission.CONTACT_UPDATE)),
    service: ContactService = Depends(get_contact_service)
):
    await service.update_status(contact_id, body.status, current_user.uid)
    return {"message": "Contact status updated successfully"}


@router.delete("/{contact_id}", response_model=MessageResponse)
async def delete_contact(
    contact_id: str,
    current_user: CurrentUser = Depends(require_permission(Permission.CONTACT_DELETE)),
    service: ContactService = Depends(get_contact_service)
):
    await service.delete_contact(contact_id)
    return {"message": "Contact deleted successfully"}
