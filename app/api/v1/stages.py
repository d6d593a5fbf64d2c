"""Deal stage endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.orm import Session

from app.api.v1._authz import authorize_or_raise, not_found, service_errors
from app.core.dependencies import get_db_session
from app.schemas.stages import StageCreateRequest, StageReorderRequest, StageResponse, StageUpdateRequest
from app.services.deal_stage_service import DealStageService

router = APIRouter(prefix="/stages", tags=["stages"])


@router.get("", response_model=list[StageResponse])
def list_stages(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[StageResponse]:
    authorize_or_raise(authorization, scopes=["stages.read"])
    with service_errors():
        rows = DealStageService(db).list_stages()
    return [StageResponse.model_validate(row) for row in rows]


@router.post("/defaults", response_model=list[StageResponse])
def initialize_default_stages(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[StageResponse]:
    authorize_or_raise(authorization, scopes=["stages.write"])
    with service_errors():
        rows = DealStageService(db).initialize_default_stages()
    return [StageResponse.model_validate(row) for row in rows]


@router.put("/order", response_model=list[StageResponse])
def reorder_stages(
    payload: StageReorderRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[StageResponse]:
    authorize_or_raise(authorization, scopes=["stages.write"])
    with service_errors():
        rows = DealStageService(db).reorder_stages(payload.stage_ids)
    return [StageResponse.model_validate(row) for row in rows]


@router.post("", response_model=StageResponse, status_code=status.HTTP_201_CREATED)
def create_stage(
    payload: StageCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> StageResponse:
    authorize_or_raise(authorization, scopes=["stages.write"])
    with service_errors():
        stage = DealStageService(db).create_stage(payload.model_dump())
    return StageResponse.model_validate(stage)


@router.patch("/{stage_id}", response_model=StageResponse)
def update_stage(
    stage_id: int,
    payload: StageUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> StageResponse:
    authorize_or_raise(authorization, scopes=["stages.write"])
    with service_errors():
        stage = DealStageService(db).update_stage(stage_id, payload.changes())
    if stage is None:
        raise not_found("Stage", stage_id)
    return StageResponse.model_validate(stage)


@router.delete("/{stage_id}")
def delete_stage(
    stage_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> dict:
    authorize_or_raise(authorization, scopes=["stages.write"])
    with service_errors():
        deleted = DealStageService(db).delete_stage(stage_id)
    if not deleted:
        raise not_found("Stage", stage_id)
    return {"status": "deleted", "id": stage_id}
