"""
Billing collaborator interface.

The subscription service only talks to this protocol; StripeBillingClient is
the production implementation and tests plug in a fake.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Protocol


class BillingError(Exception):
    """Error returned by (or while reaching) the billing provider."""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}


@dataclass
class BillingSubscription:
    """Provider subscription as seen by the subscription service."""
    subscription_id: str
    status: str
    current_period_end: Optional[datetime] = None
    item_id: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == "active"


class BillingGateway(Protocol):
    def create_customer(self, *, email: str, name: str, payment_method_id: str) -> str:
        """Create a customer with a default payment method; returns the customer id."""
        ...

    def update_customer(self, customer_id: str, *, payment_method_id: str) -> None:
        """Attach and set the customer's default payment method."""
        ...

    def create_subscription(self, *, customer_id: str, price_id: str) -> BillingSubscription:
        ...

    def retrieve_subscription(self, subscription_id: str) -> BillingSubscription:
        ...

    def update_subscription(self, subscription_id: str, *, item_id: str, price_id: str) -> BillingSubscription:
        ...

    def cancel_subscription(self, subscription_id: str) -> BillingSubscription:
        ...
