"""Activity endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.orm import Session

from app.api.v1._authz import authorize_or_raise, not_found, service_errors
from app.core.dependencies import get_db_session
from app.schemas.activities import ActivityCreateRequest, ActivityResponse, ActivityUpdateRequest
from app.services.activity_service import ActivityService

router = APIRouter(prefix="/activities", tags=["activities"])


def _responses(rows) -> list[ActivityResponse]:
    return [ActivityResponse.model_validate(row) for row in rows]


@router.get("", response_model=list[ActivityResponse])
def list_activities(
    customer_id: int | None = Query(default=None, ge=1),
    deal_id: int | None = Query(default=None, ge=1),
    include_deals: bool = Query(default=False),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[ActivityResponse]:
    authorize_or_raise(authorization, scopes=["activities.read"])
    service = ActivityService(db)
    if customer_id is not None:
        return _responses(service.list_by_customer(customer_id, include_deals=include_deals))
    if deal_id is not None:
        return _responses(service.list_by_deal(deal_id))
    return _responses(service.list_activities())


@router.get("/today", response_model=list[ActivityResponse])
def todays_activities(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[ActivityResponse]:
    authorize_or_raise(authorization, scopes=["activities.read"])
    return _responses(ActivityService(db).todays_activities())


@router.get("/open", response_model=list[ActivityResponse])
def open_items(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[ActivityResponse]:
    authorize_or_raise(authorization, scopes=["activities.read"])
    return _responses(ActivityService(db).open_items())


@router.get("/{activity_id}", response_model=ActivityResponse)
def get_activity(
    activity_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ActivityResponse:
    authorize_or_raise(authorization, scopes=["activities.read"])
    activity = ActivityService(db).get_activity(activity_id)
    if activity is None:
        raise not_found("Activity", activity_id)
    return ActivityResponse.model_validate(activity)


@router.post("", response_model=ActivityResponse, status_code=status.HTTP_201_CREATED)
def create_activity(
    payload: ActivityCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ActivityResponse:
    authorize_or_raise(authorization, scopes=["activities.write"])
    with service_errors():
        activity = ActivityService(db).create_activity(payload.model_dump())
    return ActivityResponse.model_validate(activity)


@router.patch("/{activity_id}", response_model=ActivityResponse)
def update_activity(
    activity_id: int,
    payload: ActivityUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ActivityResponse:
    authorize_or_raise(authorization, scopes=["activities.write"])
    with service_errors():
        activity = ActivityService(db).update_activity(activity_id, payload.changes())
    if activity is None:
        raise not_found("Activity", activity_id)
    return ActivityResponse.model_validate(activity)


@router.post("/{activity_id}/complete", response_model=ActivityResponse)
def complete_activity(
    activity_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ActivityResponse:
    authorize_or_raise(authorization, scopes=["activities.write"])
    with service_errors():
        activity = ActivityService(db).mark_complete(activity_id)
    if activity is None:
        raise not_found("Activity", activity_id)
    return ActivityResponse.model_validate(activity)


@router.delete("/{activity_id}")
def delete_activity(
    activity_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> dict:
    authorize_or_raise(authorization, scopes=["activities.write"])
    with service_errors():
        deleted = ActivityService(db).delete_activity(activity_id)
    if not deleted:
        raise not_found("Activity", activity_id)
    return {"status": "deleted", "id": activity_id}
