"""Product catalog service."""

from __future__ import annotations

from typing import Any

from app.core.exceptions import ValidationError
from app.models import DealLineItem, InvoiceItem, Product, ProposalItem
from app.services.base_service import BaseService


def _normalize_interval(product: Product) -> None:
    if not product.is_subscription:
        product.subscription_interval = None
    elif product.subscription_interval is None:
        raise ValidationError("subscription_interval is required for subscription products")


class ProductService(BaseService):
    """Service for products offered on deals and invoices."""

    def list_products(self, active_only: bool = False) -> list[Product]:
        query = self.db.query(Product)
        if active_only:
            query = query.filter(Product.is_active.is_(True))
        return query.order_by(Product.name, Product.id).all()

    def get_product(self, product_id: int) -> Product | None:
        return self.db.query(Product).filter(Product.id == product_id).first()

    def create_product(self, data: dict[str, Any]) -> Product:
        product = Product(**data)
        _normalize_interval(product)
        return self.save(product)

    def update_product(self, product_id: int, changes: dict[str, Any]) -> Product | None:
        product = self.get_product(product_id)
        if product is None:
            return None
        self.apply_changes(product, changes)
        try:
            _normalize_interval(product)
        except ValidationError:
            self.rollback()
            raise
        self.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product_id: int) -> bool:
        product = self.get_product(product_id)
        if product is None:
            return False
        # Line items keep their copied name and price.
        for model in (DealLineItem, InvoiceItem, ProposalItem):
            self.db.query(model).filter(model.product_id == product_id).update(
                {"product_id": None}, synchronize_session=False
            )
        self.remove(product)
        return True
