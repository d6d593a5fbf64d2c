"""Root API router for v1 endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from app.api.v1 import (
    activities,
    analytics,
    auth,
    company,
    contacts,
    customers,
    deals,
    files,
    health,
    invoices,
    products,
    proposals,
    stages,
)
from app.core.config import get_config

api_router = APIRouter(prefix=get_config().API_PREFIX)
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(customers.router)
api_router.include_router(contacts.router)
api_router.include_router(deals.router)
api_router.include_router(stages.router)
api_router.include_router(products.router)
api_router.include_router(invoices.router)
api_router.include_router(proposals.router)
api_router.include_router(company.router)
api_router.include_router(files.router)
api_router.include_router(activities.router)
api_router.include_router(analytics.router)


def get_api_router() -> APIRouter:
    return api_router
