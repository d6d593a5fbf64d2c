"""Product endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.orm import Session

from app.api.v1._authz import authorize_or_raise, not_found, service_errors
from app.core.dependencies import get_db_session
from app.schemas.products import ProductCreateRequest, ProductResponse, ProductUpdateRequest
from app.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=list[ProductResponse])
def list_products(
    active_only: bool = Query(default=False),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[ProductResponse]:
    authorize_or_raise(authorization, scopes=["products.read"])
    return [ProductResponse.model_validate(row) for row in ProductService(db).list_products(active_only=active_only)]


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ProductResponse:
    authorize_or_raise(authorization, scopes=["products.read"])
    product = ProductService(db).get_product(product_id)
    if product is None:
        raise not_found("Product", product_id)
    return ProductResponse.model_validate(product)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ProductResponse:
    authorize_or_raise(authorization, scopes=["products.write"])
    with service_errors():
        product = ProductService(db).create_product(payload.model_dump())
    return ProductResponse.model_validate(product)


@router.patch("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    payload: ProductUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ProductResponse:
    authorize_or_raise(authorization, scopes=["products.write"])
    with service_errors():
        product = ProductService(db).update_product(product_id, payload.changes())
    if product is None:
        raise not_found("Product", product_id)
    return ProductResponse.model_validate(product)


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> dict:
    authorize_or_raise(authorization, scopes=["products.write"])
    with service_errors():
        deleted = ProductService(db).delete_product(product_id)
    if not deleted:
        raise not_found("Product", product_id)
    return {"status": "deleted", "id": product_id}
