"""FastAPI dependencies for RecipeBox API.

Provides:
- Acting principal resolution from the X-User-Id header
- Admin guard
- Billing gateway
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from .billing import StripeBillingClient
from .db import get_db
from .models import User


def get_current_user_optional(
    db: Session = Depends(get_db),
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> Optional[User]:
    """Resolve the caller, or None for anonymous requests.

    The header is set by the upstream auth gateway after token validation.
    An unknown id is rejected rather than downgraded to anonymous.
    """
    if not x_user_id:
        return None

    user = db.get(User, x_user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Unknown user")
    return user


def get_current_user(
    user: Optional[User] = Depends(get_current_user_optional),
) -> User:
    if user is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Administrator access required")
    return user


def get_billing():
    """Billing gateway for the request. Overridden in tests."""
    client = StripeBillingClient()
    try:
        yield client
    finally:
        client.close()
