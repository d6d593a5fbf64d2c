"""Contact endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.orm import Session

from app.api.v1._authz import authorize_or_raise, not_found, service_errors
from app.core.dependencies import get_db_session
from app.schemas.contacts import ContactCreateRequest, ContactResponse, ContactUpdateRequest
from app.services.contact_service import ContactService

router = APIRouter(prefix="/contacts", tags=["contacts"])


@router.get("", response_model=list[ContactResponse])
def list_contacts(
    customer_id: int | None = Query(default=None, ge=1),
    q: str | None = Query(default=None, max_length=200),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[ContactResponse]:
    authorize_or_raise(authorization, scopes=["contacts.read"])
    rows = ContactService(db).list_contacts(customer_id=customer_id, q=q)
    return [ContactResponse.model_validate(row) for row in rows]


@router.get("/{contact_id}", response_model=ContactResponse)
def get_contact(
    contact_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ContactResponse:
    authorize_or_raise(authorization, scopes=["contacts.read"])
    contact = ContactService(db).get_contact(contact_id)
    if contact is None:
        raise not_found("Contact", contact_id)
    return ContactResponse.model_validate(contact)


@router.post("", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
def create_contact(
    payload: ContactCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ContactResponse:
    authorize_or_raise(authorization, scopes=["contacts.write"])
    with service_errors():
        contact = ContactService(db).create_contact(payload.model_dump())
    return ContactResponse.model_validate(contact)


@router.patch("/{contact_id}", response_model=ContactResponse)
def update_contact(
    contact_id: int,
    payload: ContactUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ContactResponse:
    authorize_or_raise(authorization, scopes=["contacts.write"])
    with service_errors():
        contact = ContactService(db).update_contact(contact_id, payload.changes())
    if contact is None:
        raise not_found("Contact", contact_id)
    return ContactResponse.model_validate(contact)


@router.delete("/{contact_id}")
def delete_contact(
    contact_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> dict:
    authorize_or_raise(authorization, scopes=["contacts.write"])
    with service_errors():
        deleted = ContactService(db).delete_contact(contact_id)
    if not deleted:
        raise not_found("Contact", contact_id)
    return {"status": "deleted", "id": contact_id}


@router.post("/{contact_id}/primary", response_model=ContactResponse)
def set_primary_contact(
    contact_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ContactResponse:
    authorize_or_raise(authorization, scopes=["contacts.write"])
    with service_errors():
        contact = ContactService(db).set_primary(contact_id)
    if contact is None:
        raise not_found("Contact", contact_id)
    return ContactResponse.model_validate(contact)


@router.put("/{contact_id}/deals/{deal_id}", response_model=ContactResponse)
def link_deal(
    contact_id: int,
    deal_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ContactResponse:
    authorize_or_raise(authorization, scopes=["contacts.write", "deals.write"])
    with service_errors():
        contact = ContactService(db).link_deal(contact_id, deal_id)
    if contact is None:
        raise not_found("Contact", contact_id)
    return ContactResponse.model_validate(contact)


@router.delete("/{contact_id}/deals/{deal_id}", response_model=ContactResponse)
def unlink_deal(
    contact_id: int,
    deal_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ContactResponse:
    authorize_or_raise(authorization, scopes=["contacts.write", "deals.write"])
    with service_errors():
        contact = ContactService(db).unlink_deal(contact_id, deal_id)
    if contact is None:
        raise not_found("Contact", contact_id)
    return ContactResponse.model_validate(contact)
