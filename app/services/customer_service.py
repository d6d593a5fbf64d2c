"""Customer service: CRUD plus free-text search."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import or_

from app.core.exceptions import ConflictError
from app.models import Activity, Customer, Deal, Invoice, Proposal
from app.services.base_service import BaseService

logger = logging.getLogger(__name__)


class CustomerService(BaseService):
    """Service for customer records."""

    def list_customers(self, q: str | None = None) -> list[Customer]:
        query = self.db.query(Customer)
        term = (q or "").strip()
        if term:
            pattern = f"%{term}%"
            query = query.filter(
                or_(
                    Customer.name.ilike(pattern),
                    Customer.email.ilike(pattern),
                    Customer.company.ilike(pattern),
                    Customer.phone.ilike(pattern),
                )
            )
        return query.order_by(Customer.created_at.desc(), Customer.id.desc()).all()

    def get_customer(self, customer_id: int) -> Customer | None:
        return self.db.query(Customer).filter(Customer.id == customer_id).first()

    def create_customer(self, data: dict[str, Any]) -> Customer:
        customer = self.save(Customer(**data))
        logger.info("customer.created", extra={"event": "customer.created", "customer_id": customer.id})
        return customer

    def update_customer(self, customer_id: int, changes: dict[str, Any]) -> Customer | None:
        customer = self.get_customer(customer_id)
        if customer is None:
            return None
        self.apply_changes(customer, changes)
        self.commit()
        self.db.refresh(customer)
        return customer

    def delete_customer(self, customer_id: int) -> bool:
        customer = self.get_customer(customer_id)
        if customer is None:
            return False

        deal_count = self.db.query(Deal).filter(Deal.customer_id == customer_id).count()
        invoice_count = self.db.query(Invoice).filter(Invoice.customer_id == customer_id).count()
        proposal_count = self.db.query(Proposal).filter(Proposal.customer_id == customer_id).count()
        if deal_count or invoice_count or proposal_count:
            raise ConflictError(
                f"Customer {customer_id} still has {deal_count} deal(s), {invoice_count} invoice(s) "
                f"and {proposal_count} proposal(s)."
            )

        self.db.query(Activity).filter(Activity.customer_id == customer_id).delete(synchronize_session=False)
        self.remove(customer)
        logger.info("customer.deleted", extra={"event": "customer.deleted", "customer_id": customer_id})
        return True
