"""Deal endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.v1._authz import authorize_or_raise, not_found, service_errors
from app.core.dependencies import get_db_session
from app.schemas.deals import (
    DealContactsRequest,
    DealCreateRequest,
    DealResponse,
    DealStageMoveRequest,
    DealUpdateRequest,
    LineItemCreateRequest,
)
from app.services.deal_service import DealService

router = APIRouter(prefix="/deals", tags=["deals"])


@router.get("", response_model=list[DealResponse])
def list_deals(
    stage_id: int | None = Query(default=None, ge=1),
    customer_id: int | None = Query(default=None, ge=1),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[DealResponse]:
    authorize_or_raise(authorization, scopes=["deals.read"])
    rows = DealService(db).list_deals(stage_id=stage_id, customer_id=customer_id)
    return [DealResponse.model_validate(row) for row in rows]


@router.get("/{deal_id}", response_model=DealResponse)
def get_deal(
    deal_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> DealResponse:
    authorize_or_raise(authorization, scopes=["deals.read"])
    deal = DealService(db).get_deal(deal_id)
    if deal is None:
        raise not_found("Deal", deal_id)
    return DealResponse.model_validate(deal)


@router.post("", response_model=DealResponse, status_code=status.HTTP_201_CREATED)
def create_deal(
    payload: DealCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> DealResponse:
    authorize_or_raise(authorization, scopes=["deals.write"])
    with service_errors():
        deal = DealService(db).create_deal(payload.model_dump())
    return DealResponse.model_validate(deal)


@router.patch("/{deal_id}", response_model=DealResponse)
def update_deal(
    deal_id: int,
    payload: DealUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> DealResponse:
    authorize_or_raise(authorization, scopes=["deals.write"])
    with service_errors():
        deal = DealService(db).update_deal(deal_id, payload.changes())
    if deal is None:
        raise not_found("Deal", deal_id)
    return DealResponse.model_validate(deal)


@router.delete("/{deal_id}")
def delete_deal(
    deal_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> dict:
    authorize_or_raise(authorization, scopes=["deals.write"])
    with service_errors():
        deleted = DealService(db).delete_deal(deal_id)
    if not deleted:
        raise not_found("Deal", deal_id)
    return {"status": "deleted", "id": deal_id}


@router.post("/{deal_id}/stage", response_model=DealResponse)
def move_deal_stage(
    deal_id: int,
    payload: DealStageMoveRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> DealResponse:
    authorize_or_raise(authorization, scopes=["deals.write"])
    with service_errors():
        deal = DealService(db).move_to_stage(deal_id, payload.stage_id)
    if deal is None:
        raise not_found("Deal", deal_id)
    return DealResponse.model_validate(deal)


@router.post("/{deal_id}/line-items", response_model=DealResponse, status_code=status.HTTP_201_CREATED)
def add_line_item(
    deal_id: int,
    payload: LineItemCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> DealResponse:
    authorize_or_raise(authorization, scopes=["deals.write"])
    with service_errors():
        deal = DealService(db).add_line_item(
            deal_id,
            product_id=payload.product_id,
            quantity=payload.quantity,
            custom_price=payload.custom_price,
            item_id=payload.id,
        )
    if deal is None:
        raise not_found("Deal", deal_id)
    return DealResponse.model_validate(deal)


@router.delete("/{deal_id}/line-items/{item_id}", response_model=DealResponse)
def remove_line_item(
    deal_id: int,
    item_id: str,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> DealResponse:
    authorize_or_raise(authorization, scopes=["deals.write"])
    with service_errors():
        deal = DealService(db).remove_line_item(deal_id, item_id)
    if deal is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Line item {item_id} not found on deal {deal_id}",
        )
    return DealResponse.model_validate(deal)


@router.put("/{deal_id}/contacts", response_model=DealResponse)
def set_deal_contacts(
    deal_id: int,
    payload: DealContactsRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> DealResponse:
    authorize_or_raise(authorization, scopes=["deals.write"])
    with service_errors():
        deal = DealService(db).set_contacts(deal_id, payload.contact_ids)
    if deal is None:
        raise not_found("Deal", deal_id)
    return DealResponse.model_validate(deal)
