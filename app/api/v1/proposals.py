"""Proposal endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.orm import Session

from app.api.v1._authz import authorize_or_raise, not_found, service_errors
from app.core.dependencies import get_db_session
from app.models.enums import ProposalStatus
from app.schemas.proposals import (
    ProposalCreateRequest,
    ProposalFromDealRequest,
    ProposalResponse,
    ProposalUpdateRequest,
)
from app.services.proposal_service import ProposalService

router = APIRouter(prefix="/proposals", tags=["proposals"])


@router.get("", response_model=list[ProposalResponse])
def list_proposals(
    customer_id: int | None = Query(default=None, ge=1),
    deal_id: int | None = Query(default=None, ge=1),
    proposal_status: ProposalStatus | None = Query(default=None, alias="status"),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[ProposalResponse]:
    authorize_or_raise(authorization, scopes=["proposals.read"])
    rows = ProposalService(db).list_proposals(customer_id=customer_id, deal_id=deal_id, status=proposal_status)
    return [ProposalResponse.model_validate(row) for row in rows]


@router.post("/refresh-expired", response_model=list[ProposalResponse])
def refresh_expired(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[ProposalResponse]:
    authorize_or_raise(authorization, scopes=["proposals.write"])
    with service_errors():
        rows = ProposalService(db).refresh_expired()
    return [ProposalResponse.model_validate(row) for row in rows]


@router.get("/{proposal_id}", response_model=ProposalResponse)
def get_proposal(
    proposal_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ProposalResponse:
    authorize_or_raise(authorization, scopes=["proposals.read"])
    proposal = ProposalService(db).get_proposal(proposal_id)
    if proposal is None:
        raise not_found("Proposal", proposal_id)
    return ProposalResponse.model_validate(proposal)


@router.post("", response_model=ProposalResponse, status_code=status.HTTP_201_CREATED)
def create_proposal(
    payload: ProposalCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ProposalResponse:
    authorize_or_raise(authorization, scopes=["proposals.write"])
    with service_errors():
        proposal = ProposalService(db).create_proposal(payload.model_dump())
    return ProposalResponse.model_validate(proposal)


@router.post("/from-deal/{deal_id}", response_model=ProposalResponse, status_code=status.HTTP_201_CREATED)
def create_proposal_from_deal(
    deal_id: int,
    payload: ProposalFromDealRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ProposalResponse:
    authorize_or_raise(authorization, scopes=["proposals.write", "deals.read"])
    with service_errors():
        proposal = ProposalService(db).create_from_deal(deal_id, payload.model_dump())
    if proposal is None:
        raise not_found("Deal", deal_id)
    return ProposalResponse.model_validate(proposal)


@router.patch("/{proposal_id}", response_model=ProposalResponse)
def update_proposal(
    proposal_id: int,
    payload: ProposalUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ProposalResponse:
    authorize_or_raise(authorization, scopes=["proposals.write"])
    with service_errors():
        proposal = ProposalService(db).update_proposal(proposal_id, payload.changes())
    if proposal is None:
        raise not_found("Proposal", proposal_id)
    return ProposalResponse.model_validate(proposal)


def _transition(proposal_id: int, action: str, authorization: str | None, db: Session) -> ProposalResponse:
    authorize_or_raise(authorization, scopes=["proposals.write"])
    service = ProposalService(db)
    with service_errors():
        proposal = getattr(service, f"mark_{action}")(proposal_id)
    if proposal is None:
        raise not_found("Proposal", proposal_id)
    return ProposalResponse.model_validate(proposal)


@router.post("/{proposal_id}/send", response_model=ProposalResponse)
def send_proposal(
    proposal_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ProposalResponse:
    return _transition(proposal_id, "sent", authorization, db)


@router.post("/{proposal_id}/view", response_model=ProposalResponse)
def view_proposal(
    proposal_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ProposalResponse:
    return _transition(proposal_id, "viewed", authorization, db)


@router.post("/{proposal_id}/accept", response_model=ProposalResponse)
def accept_proposal(
    proposal_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ProposalResponse:
    return _transition(proposal_id, "accepted", authorization, db)


@router.post("/{proposal_id}/reject", response_model=ProposalResponse)
def reject_proposal(
    proposal_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ProposalResponse:
    return _transition(proposal_id, "rejected", authorization, db)


@router.delete("/{proposal_id}")
def delete_proposal(
    proposal_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> dict:
    authorize_or_raise(authorization, scopes=["proposals.write"])
    with service_errors():
        deleted = ProposalService(db).delete_proposal(proposal_id)
    if not deleted:
        raise not_found("Proposal", proposal_id)
    return {"status": "deleted", "id": proposal_id}
