"""Company profile service; the profile is a single row."""

from __future__ import annotations

import logging
from typing import Any

from app.core.config import get_config
from app.core.exceptions import ValidationError
from app.models import Company
from app.services.base_service import BaseService
from app.services.storage_service import StorageService

logger = logging.getLogger(__name__)


def logo_url(logo_key: str | None) -> str | None:
    if not logo_key:
        return None
    return f"{get_config().API_PREFIX}/files/{logo_key}"


class CompanyService(BaseService):
    """Service for the business profile shown on invoices."""

    def __init__(self, db=None, storage: StorageService | None = None) -> None:
        super().__init__(db)
        self.storage = storage or StorageService()

    def get_company(self) -> Company | None:
        return self.db.query(Company).order_by(Company.id).first()

    def upsert_company(self, data: dict[str, Any]) -> Company:
        company = self.get_company()
        if company is None:
            company = self.save(Company(**data))
            logger.info("company.created", extra={"event": "company.created", "company_id": company.id})
            return company
        self.apply_changes(company, data)
        self.commit()
        self.db.refresh(company)
        return company

    def update_logo(self, data: bytes, content_type: str | None, filename: str | None = None) -> Company:
        """Store a new logo and drop the previous one."""
        company = self.get_company()
        if company is None:
            raise ValidationError("Save the company profile before uploading a logo.")
        blob = self.storage.upload_logo(data, content_type=content_type, filename=filename)
        previous = company.logo_key
        company.logo_key = blob.key
        self.commit()
        if previous and previous != blob.key:
            self.storage.delete(previous)
        self.db.refresh(company)
        logger.info("company.logo.updated", extra={"event": "company.logo.updated", "key": blob.key})
        return company

    def remove_logo(self) -> Company | None:
        company = self.get_company()
        if company is None:
            return None
        if company.logo_key:
            self.storage.delete(company.logo_key)
            company.logo_key = None
            self.commit()
            self.db.refresh(company)
        return company
