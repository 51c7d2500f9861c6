"""
Domain errors for RecipeBox.

Services raise these; the HTTP layer turns them into responses through the
single handler registered in main.py. Stack traces are never returned to
clients.

Status codes:
- 400: PaymentMethodRequired, ValidationFailed
- 403: Forbidden, PrivacyTierRequired, QuotaExceeded
- 404: NotFound
- 502: BillingFailure (billing provider call failed)
"""

from typing import Any, Optional

from fastapi import status


class AppError(Exception):
    """Base application error with a consistent error shape."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


class NotFound(AppError):
    """Referenced user, recipe or cookbook does not exist (404)."""

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        super().__init__(
            code="NOT_FOUND",
            message=f"{resource.capitalize()} not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id} if resource_id else {"resource": resource},
        )
        self.resource = resource


class Forbidden(AppError):
    """Access control denied the view or mutation (403)."""

    def __init__(self, message: str = "Permission denied", details: Optional[dict[str, Any]] = None):
        super().__init__(
            code="FORBIDDEN",
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            details=details,
        )


class PrivacyTierRequired(AppError):
    """Caller may edit the item but privacy control needs tier 2 (403)."""

    def __init__(self, message: str = "Privacy control is only available for Tier 2 subscribers"):
        super().__init__(
            code="PRIVACY_TIER_REQUIRED",
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
        )


class QuotaExceeded(AppError):
    """Creation blocked by the subscription tier's limit (403)."""

    def __init__(self, resource: str, limit: int, count: int):
        super().__init__(
            code="QUOTA_EXCEEDED",
            message=(
                f"You have reached your {resource} limit. "
                f"Please upgrade your subscription to create more {resource}s."
            ),
            status_code=status.HTTP_403_FORBIDDEN,
            details={"resource": resource, "limit": limit, "count": count},
        )
        self.resource = resource
        self.limit = limit
        self.count = count


class PaymentMethodRequired(AppError):
    """Paid tier requested without a payment method (400)."""

    def __init__(self, message: str = "Payment method ID is required for paid subscriptions"):
        super().__init__(
            code="PAYMENT_METHOD_REQUIRED",
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
        )


class ValidationFailed(AppError):
    """Request is well-formed but semantically invalid (400)."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
        )


class BillingFailure(AppError):
    """Billing provider call failed during an upgrade; nothing was saved (502)."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(
            code="BILLING_FAILURE",
            message=f"Failed to update subscription: {message}",
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details,
        )
