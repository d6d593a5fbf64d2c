"""SQLAlchemy model package for the CRM schema."""

from app.models.activity import Activity
from app.models.base import Base
from app.models.company import Company
from app.models.contact import Contact, deal_contacts
from app.models.customer import Customer
from app.models.deal import Deal, DealLineItem
from app.models.deal_stage import DealStage
from app.models.enums import (
    ActivityPriority,
    ActivityType,
    InvoiceStatus,
    ProposalItemType,
    ProposalStatus,
    SubscriptionInterval,
    UserRole,
)
from app.models.invoice import Invoice, InvoiceItem
from app.models.product import Product
from app.models.proposal import Proposal, ProposalItem, proposal_contacts
from app.models.user import User

__all__ = [
    "Activity",
    "ActivityPriority",
    "ActivityType",
    "Base",
    "Company",
    "Contact",
    "Customer",
    "Deal",
    "DealLineItem",
    "DealStage",
    "Invoice",
    "InvoiceItem",
    "InvoiceStatus",
    "Product",
    "Proposal",
    "ProposalItem",
    "ProposalItemType",
    "ProposalStatus",
    "SubscriptionInterval",
    "User",
    "UserRole",
    "deal_contacts",
    "proposal_contacts",
]
