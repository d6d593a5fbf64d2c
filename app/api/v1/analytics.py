"""Dashboard and forecast endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.orm import Session

from app.api.v1._authz import authorize_or_raise
from app.core.dependencies import get_db_session
from app.schemas.analytics import DashboardStats, ForecastResponse
from app.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/dashboard", response_model=DashboardStats)
def dashboard_stats(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> DashboardStats:
    authorize_or_raise(authorization, scopes=["analytics.read"])
    return DashboardStats(**AnalyticsService(db).dashboard_stats())


@router.get("/forecast", response_model=ForecastResponse)
def forecast(
    months: int | None = Query(default=None, ge=1, le=24),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ForecastResponse:
    authorize_or_raise(authorization, scopes=["analytics.read"])
    return ForecastResponse(**AnalyticsService(db).forecast(months=months))
