"""Dashboard and forecast response schemas."""

from __future__ import annotations

from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_customers: int
    total_deals: int
    total_products: int
    total_invoices: int
    total_revenue: float
    total_deal_value: float
    subscription_deal_value: float
    one_time_deal_value: float
    open_tasks: int


class ForecastBucket(BaseModel):
    key: str
    label: str
    count: int
    sum: float
    weighted: float


class ForecastResponse(BaseModel):
    open_pipeline_total: float
    weighted_pipeline: float
    closed_won_this_month: float
    by_month: list[ForecastBucket]
    by_stage: list[ForecastBucket]
