"""Company profile and logo endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Header, UploadFile
from sqlalchemy.orm import Session

from app.api.v1._authz import authorize_or_raise, not_found, service_errors
from app.core.dependencies import get_db_session
from app.models import Company
from app.schemas.company import CompanyResponse, CompanyUpsertRequest, UploadLimits
from app.services.company_service import CompanyService, logo_url
from app.services.storage_service import StorageService

router = APIRouter(prefix="/company", tags=["company"])


def _to_response(company: Company) -> CompanyResponse:
    response = CompanyResponse.model_validate(company)
    response.logo_url = logo_url(company.logo_key)
    return response


@router.get("", response_model=CompanyResponse | None)
def get_company(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> CompanyResponse | None:
    authorize_or_raise(authorization, scopes=["company.read"])
    company = CompanyService(db).get_company()
    return _to_response(company) if company is not None else None


@router.put("", response_model=CompanyResponse)
def upsert_company(
    payload: CompanyUpsertRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> CompanyResponse:
    authorize_or_raise(authorization, scopes=["company.write"])
    with service_errors():
        company = CompanyService(db).upsert_company(payload.model_dump())
    return _to_response(company)


@router.get("/logo/limits", response_model=UploadLimits)
def upload_limits(authorization: str | None = Header(default=None, alias="Authorization")) -> UploadLimits:
    authorize_or_raise(authorization, scopes=["company.read"])
    return UploadLimits(**StorageService().upload_limits())


@router.post("/logo", response_model=CompanyResponse)
def upload_logo(
    file: UploadFile = File(...),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> CompanyResponse:
    authorize_or_raise(authorization, scopes=["company.write"])
    data = file.file.read()
    with service_errors():
        company = CompanyService(db).update_logo(data, content_type=file.content_type, filename=file.filename)
    return _to_response(company)


@router.delete("/logo", response_model=CompanyResponse)
def remove_logo(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> CompanyResponse:
    authorize_or_raise(authorization, scopes=["company.write"])
    with service_errors():
        company = CompanyService(db).remove_logo()
    if company is None:
        raise not_found("Company", "profile")
    return _to_response(company)
