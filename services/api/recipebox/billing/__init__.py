from .gateway import BillingError, BillingGateway, BillingSubscription
from .stripe_client import StripeBillingClient

__all__ = [
    "BillingError",
    "BillingGateway",
    "BillingSubscription",
    "StripeBillingClient",
]
