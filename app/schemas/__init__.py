"""Pydantic schema package for API contracts."""

from app.schemas.activities import ActivityCreateRequest, ActivityResponse, ActivityUpdateRequest
from app.schemas.analytics import DashboardStats, ForecastBucket, ForecastResponse
from app.schemas.auth import (
    AuthProviderStatus,
    LoginRequest,
    RefreshRequest,
    SignUpRequest,
    TokenResponse,
    UserResponse,
)
from app.schemas.common import Address
from app.schemas.company import CompanyResponse, CompanyUpsertRequest, UploadLimits
from app.schemas.contacts import ContactCreateRequest, ContactResponse, ContactUpdateRequest
from app.schemas.customers import CustomerCreateRequest, CustomerResponse, CustomerUpdateRequest
from app.schemas.deals import (
    DealContactsRequest,
    DealCreateRequest,
    DealResponse,
    DealStageMoveRequest,
    DealUpdateRequest,
    LineItemCreateRequest,
    LineItemResponse,
)
from app.schemas.invoices import (
    InvoiceCreateRequest,
    InvoiceFromDealRequest,
    InvoiceItemRequest,
    InvoiceResponse,
    InvoiceStatusUpdateRequest,
)
from app.schemas.products import ProductCreateRequest, ProductResponse, ProductUpdateRequest
from app.schemas.proposals import (
    ProposalCreateRequest,
    ProposalFromDealRequest,
    ProposalItemRequest,
    ProposalItemResponse,
    ProposalResponse,
    ProposalUpdateRequest,
)
from app.schemas.stages import StageCreateRequest, StageReorderRequest, StageResponse, StageUpdateRequest

__all__ = [
    "ActivityCreateRequest",
    "ActivityResponse",
    "ActivityUpdateRequest",
    "Address",
    "AuthProviderStatus",
    "CompanyResponse",
    "CompanyUpsertRequest",
    "ContactCreateRequest",
    "ContactResponse",
    "ContactUpdateRequest",
    "CustomerCreateRequest",
    "CustomerResponse",
    "CustomerUpdateRequest",
    "DashboardStats",
    "DealContactsRequest",
    "DealCreateRequest",
    "DealResponse",
    "DealStageMoveRequest",
    "DealUpdateRequest",
    "ForecastBucket",
    "ForecastResponse",
    "InvoiceCreateRequest",
    "InvoiceFromDealRequest",
    "InvoiceItemRequest",
    "InvoiceResponse",
    "InvoiceStatusUpdateRequest",
    "LineItemCreateRequest",
    "LineItemResponse",
    "LoginRequest",
    "ProductCreateRequest",
    "ProductResponse",
    "ProductUpdateRequest",
    "ProposalCreateRequest",
    "ProposalFromDealRequest",
    "ProposalItemRequest",
    "ProposalItemResponse",
    "ProposalResponse",
    "ProposalUpdateRequest",
    "RefreshRequest",
    "SignUpRequest",
    "StageCreateRequest",
    "StageReorderRequest",
    "StageResponse",
    "StageUpdateRequest",
    "TokenResponse",
    "UploadLimits",
    "UserResponse",
]
