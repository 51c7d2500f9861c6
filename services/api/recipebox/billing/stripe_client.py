"""
Stripe REST client for recurring subscriptions.

Talks to the Stripe API directly over httpx with form-encoded bodies.
Only the calls the subscription service needs are implemented.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from ..settings import settings
from .gateway import BillingError, BillingSubscription

logger = logging.getLogger(__name__)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value in (None, ""):
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


def _require_id(data: Any, kind: str) -> str:
    if not isinstance(data, dict) or not data.get("id"):
        raise BillingError(f"Billing provider returned a {kind} without an id", code="invalid_response")
    return data["id"]


def parse_subscription(data: Dict[str, Any]) -> BillingSubscription:
    """Build a BillingSubscription from a Stripe subscription object."""
    subscription_id = _require_id(data, "subscription")
    items = (data.get("items") or {}).get("data") or []
    first_item = items[0] if items else {}
    # Newer API versions moved the billing period onto the subscription items
    period_end = data.get("current_period_end") or first_item.get("current_period_end")
    return BillingSubscription(
        subscription_id=subscription_id,
        status=data.get("status", "unknown"),
        current_period_end=_parse_timestamp(period_end),
        item_id=first_item.get("id"),
    )


class StripeBillingClient:
    """
    Client for the Stripe Billing API.

    Handles:
    - Customers and their default payment method
    - Creating, retrieving, updating and cancelling subscriptions
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        api_base: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.secret_key = secret_key or settings.stripe_secret_key
        self.api_base = (api_base or settings.stripe_api_base).rstrip("/")
        self._client = httpx.Client(
            base_url=self.api_base,
            headers={"Authorization": f"Bearer {self.secret_key or ''}"},
            timeout=timeout or settings.stripe_timeout_seconds,
            transport=transport,
        )

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _request(self, method: str, path: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Execute a request against the Stripe API.

        Raises:
            BillingError: on transport failure or a non-2xx response
        """
        if not self.secret_key:
            raise BillingError("Stripe secret key is not configured", code="not_configured")

        try:
            response = self._client.request(method, path, data=data)
        except httpx.HTTPError as e:
            logger.error("Stripe request failed", extra={"path": path, "error": str(e)})
            raise BillingError(f"Billing provider unreachable: {e}", code="transport_error") from e

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.is_error:
            error = payload.get("error") or {}
            message = error.get("message") or f"Billing provider returned HTTP {response.status_code}"
            logger.error("Stripe API error", extra={
                "path": path,
                "status_code": response.status_code,
                "error_code": error.get("code"),
            })
            raise BillingError(message, code=error.get("code"), details={
                "status_code": response.status_code,
                "type": error.get("type"),
            })

        return payload

    def create_customer(self, *, email: str, name: str, payment_method_id: str) -> str:
        data = self._request("POST", "/customers", {
            "email": email,
            "name": name,
            "payment_method": payment_method_id,
            "invoice_settings[default_payment_method]": payment_method_id,
        })
        return _require_id(data, "customer")

    def update_customer(self, customer_id: str, *, payment_method_id: str) -> None:
        self._request("POST", f"/payment_methods/{payment_method_id}/attach", {
            "customer": customer_id,
        })
        self._request("POST", f"/customers/{customer_id}", {
            "invoice_settings[default_payment_method]": payment_method_id,
        })

    def create_subscription(self, *, customer_id: str, price_id: str) -> BillingSubscription:
        data = self._request("POST", "/subscriptions", {
            "customer": customer_id,
            "items[0][price]": price_id,
            "expand[]": "latest_invoice.payment_intent",
        })
        return parse_subscription(data)

    def retrieve_subscription(self, subscription_id: str) -> BillingSubscription:
        return parse_subscription(self._request("GET", f"/subscriptions/{subscription_id}"))

    def update_subscription(self, subscription_id: str, *, item_id: str, price_id: str) -> BillingSubscription:
        data = self._request("POST", f"/subscriptions/{subscription_id}", {
            "items[0][id]": item_id,
            "items[0][price]": price_id,
        })
        return parse_subscription(data)

    def cancel_subscription(self, subscription_id: str) -> BillingSubscription:
        return parse_subscription(self._request("DELETE", f"/subscriptions/{subscription_id}"))
