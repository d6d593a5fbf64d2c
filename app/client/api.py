"""Thin ``requests`` client for the PipeDesk HTTP API.

Every call is awaited once: no retries, no debouncing. Error responses are
raised as the matching :mod:`app.core.exceptions` type.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    CRMException,
    NotFoundError,
    ServiceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_ERRORS: dict[int, type[CRMException]] = {
    400: ValidationError,
    403: AuthorizationError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
}


def _error_detail(response: requests.Response) -> tuple[str, str | None]:
    try:
        detail = response.json().get("detail")
    except (ValueError, AttributeError):
        return response.text or response.reason, None
    if isinstance(detail, dict):
        return str(detail.get("message", detail)), detail.get("code")
    return str(detail), None


class CRMClient:
    """Bearer-authenticated JSON client bound to one API base URL."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        session: requests.Session | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.refresh_token: str | None = None
        self.session = session or requests.Session()
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                headers=self._headers(),
                timeout=self.timeout,
                **kwargs,
            )
        except requests.exceptions.RequestException as exc:
            logger.warning(
                "client.request.failed",
                extra={"event": "client.request.failed", "method": method, "path": path, "error": str(exc)},
            )
            raise ServiceError(f"Request to {path} failed.") from exc

        if response.status_code >= 400:
            message, code = _error_detail(response)
            if response.status_code == 401:
                raise AuthenticationError(message, code=code)
            raise _STATUS_ERRORS.get(response.status_code, ServiceError)(message)
        if not response.content:
            return None
        return response.json()

    # auth
    def login(self, email: str, password: str) -> dict:
        tokens = self.request("POST", "/auth/login", json={"email": email, "password": password})
        self.token = tokens["access_token"]
        self.refresh_token = tokens["refresh_token"]
        return tokens

    def sign_up(self, email: str, password: str, name: str) -> dict:
        return self.request("POST", "/auth/signup", json={"email": email, "password": password, "name": name})

    def me(self) -> dict:
        return self.request("GET", "/auth/me")

    # customers
    def list_customers(self, q: str | None = None) -> list[dict]:
        return self.request("GET", "/customers", params={"q": q} if q else None)

    def create_customer(self, data: dict) -> dict:
        return self.request("POST", "/customers", json=data)

    def update_customer(self, customer_id: int, changes: dict) -> dict:
        return self.request("PATCH", f"/customers/{customer_id}", json=changes)

    def delete_customer(self, customer_id: int) -> None:
        self.request("DELETE", f"/customers/{customer_id}")

    # deals
    def list_deals(self, stage_id: int | None = None, customer_id: int | None = None) -> list[dict]:
        params = {key: value for key, value in {"stage_id": stage_id, "customer_id": customer_id}.items() if value}
        return self.request("GET", "/deals", params=params or None)

    def get_deal(self, deal_id: int) -> dict:
        return self.request("GET", f"/deals/{deal_id}")

    def create_deal(self, data: dict) -> dict:
        return self.request("POST", "/deals", json=data)

    def update_deal(self, deal_id: int, changes: dict) -> dict:
        return self.request("PATCH", f"/deals/{deal_id}", json=changes)

    def delete_deal(self, deal_id: int) -> None:
        self.request("DELETE", f"/deals/{deal_id}")

    def move_deal(self, deal_id: int, stage_id: int) -> dict:
        return self.request("POST", f"/deals/{deal_id}/stage", json={"stage_id": stage_id})

    def add_line_item(
        self,
        deal_id: int,
        product_id: int,
        quantity: int = 1,
        custom_price: float | None = None,
        item_id: str | None = None,
    ) -> dict:
        payload: dict[str, Any] = {"product_id": product_id, "quantity": quantity}
        if custom_price is not None:
            payload["custom_price"] = custom_price
        if item_id is not None:
            payload["id"] = item_id
        return self.request("POST", f"/deals/{deal_id}/line-items", json=payload)

    def remove_line_item(self, deal_id: int, item_id: str) -> dict:
        return self.request("DELETE", f"/deals/{deal_id}/line-items/{item_id}")

    # products and stages
    def list_products(self, active_only: bool = False) -> list[dict]:
        return self.request("GET", "/products", params={"active_only": "true"} if active_only else None)

    def update_product(self, product_id: int, changes: dict) -> dict:
        return self.request("PATCH", f"/products/{product_id}", json=changes)

    def delete_product(self, product_id: int) -> None:
        self.request("DELETE", f"/products/{product_id}")

    def list_stages(self) -> list[dict]:
        return self.request("GET", "/stages")

    # invoices and company
    def list_invoices(self, customer_id: int | None = None, status: str | None = None) -> list[dict]:
        params = {key: value for key, value in {"customer_id": customer_id, "status": status}.items() if value}
        return self.request("GET", "/invoices", params=params or None)

    def update_invoice_status(self, invoice_id: int, status: str) -> dict:
        return self.request("PATCH", f"/invoices/{invoice_id}/status", json={"status": status})

    # proposals
    def list_proposals(self, customer_id: int | None = None, deal_id: int | None = None) -> list[dict]:
        params = {key: value for key, value in {"customer_id": customer_id, "deal_id": deal_id}.items() if value}
        return self.request("GET", "/proposals", params=params or None)

    def create_proposal(self, data: dict) -> dict:
        return self.request("POST", "/proposals", json=data)

    def update_proposal(self, proposal_id: int, changes: dict) -> dict:
        return self.request("PATCH", f"/proposals/{proposal_id}", json=changes)

    def delete_proposal(self, proposal_id: int) -> None:
        self.request("DELETE", f"/proposals/{proposal_id}")

    def proposal_action(self, proposal_id: int, action: str) -> dict:
        """Run ``send``, ``view``, ``accept`` or ``reject`` on a proposal."""
        return self.request("POST", f"/proposals/{proposal_id}/{action}")

    def get_company(self) -> dict | None:
        return self.request("GET", "/company")

    def upsert_company(self, data: dict) -> dict:
        return self.request("PUT", "/company", json=data)
