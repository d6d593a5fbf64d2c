"""Contact service: people at customers and their links to deals."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import or_

from app.core.exceptions import NotFoundError
from app.models import Contact, Customer, Deal, proposal_contacts
from app.services.base_service import BaseService

logger = logging.getLogger(__name__)


class ContactService(BaseService):
    """Service for contacts, the primary-contact flag and deal links."""

    def list_contacts(self, customer_id: int | None = None, q: str | None = None) -> list[Contact]:
        query = self.db.query(Contact)
        if customer_id is not None:
            query = query.filter(Contact.customer_id == customer_id)
        term = (q or "").strip()
        if term:
            pattern = f"%{term}%"
            query = query.filter(
                or_(
                    Contact.first_name.ilike(pattern),
                    Contact.last_name.ilike(pattern),
                    Contact.email.ilike(pattern),
                    Contact.phone.ilike(pattern),
                    Contact.title.ilike(pattern),
                    Contact.department.ilike(pattern),
                )
            )
        return query.order_by(Contact.last_name, Contact.first_name, Contact.id).all()

    def get_contact(self, contact_id: int) -> Contact | None:
        return self.db.query(Contact).filter(Contact.id == contact_id).first()

    def _require_customer(self, customer_id: int | None) -> None:
        if customer_id is None:
            return
        if self.db.query(Customer.id).filter(Customer.id == customer_id).first() is None:
            raise NotFoundError(f"Customer not found: {customer_id}")

    def _clear_primary(self, customer_id: int | None, keep_id: int | None = None) -> None:
        if customer_id is None:
            return
        query = self.db.query(Contact).filter(Contact.customer_id == customer_id, Contact.is_primary.is_(True))
        for other in query.all():
            if other.id != keep_id:
                other.is_primary = False

    def create_contact(self, data: dict[str, Any]) -> Contact:
        self._require_customer(data.get("customer_id"))
        contact = Contact(**data)
        if contact.is_primary:
            self._clear_primary(contact.customer_id)
        contact = self.save(contact)
        logger.info("contact.created", extra={"event": "contact.created", "contact_id": contact.id})
        return contact

    def update_contact(self, contact_id: int, changes: dict[str, Any]) -> Contact | None:
        contact = self.get_contact(contact_id)
        if contact is None:
            return None
        if "customer_id" in changes:
            self._require_customer(changes["customer_id"])
            if changes["customer_id"] != contact.customer_id:
                contact.is_primary = False
        self.apply_changes(contact, changes)
        self.commit()
        self.db.refresh(contact)
        return contact

    def delete_contact(self, contact_id: int) -> bool:
        contact = self.get_contact(contact_id)
        if contact is None:
            return False
        self.db.execute(proposal_contacts.delete().where(proposal_contacts.c.contact_id == contact_id))
        self.remove(contact)
        return True

    def set_primary(self, contact_id: int) -> Contact | None:
        """Make a contact the single primary contact of its customer."""
        contact = self.get_contact(contact_id)
        if contact is None:
            return None
        self._clear_primary(contact.customer_id, keep_id=contact.id)
        contact.is_primary = True
        self.commit()
        self.db.refresh(contact)
        return contact

    def _get_deal(self, deal_id: int) -> Deal:
        deal = self.db.query(Deal).filter(Deal.id == deal_id).first()
        if deal is None:
            raise NotFoundError(f"Deal not found: {deal_id}")
        return deal

    def link_deal(self, contact_id: int, deal_id: int) -> Contact | None:
        contact = self.get_contact(contact_id)
        if contact is None:
            return None
        deal = self._get_deal(deal_id)
        if deal not in contact.deals:
            contact.deals.append(deal)
            self.commit()
        return contact

    def unlink_deal(self, contact_id: int, deal_id: int) -> Contact | None:
        contact = self.get_contact(contact_id)
        if contact is None:
            return None
        deal = self._get_deal(deal_id)
        if deal in contact.deals:
            contact.deals.remove(deal)
            self.commit()
        return contact
