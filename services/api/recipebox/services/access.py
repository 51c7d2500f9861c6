"""Access control for recipes and cookbooks.

The acting principal is always passed in explicitly; None means anonymous.
Items only need `user_id` and `is_private` attributes.
"""

import logging
from typing import Any, Optional

from sqlalchemy import or_

from ..errors import Forbidden, PrivacyTierRequired
from ..models import User
from .entitlements import has_tier1_access, has_tier2_access

logger = logging.getLogger("recipebox.access")


def _is_owner(principal: Optional[User], item: Any) -> bool:
    return principal is not None and principal.id == item.user_id


def can_view(principal: Optional[User], item: Any) -> bool:
    # 1. Public (false or never set) is visible to everyone
    if not item.is_private:
        return True
    # 2. Private content needs a principal
    if principal is None:
        return False
    # 3. Owner, 4. admin
    return _is_owner(principal, item) or principal.is_admin


def can_mutate(principal: Optional[User], item: Any) -> bool:
    if principal is None:
        return False
    return _is_owner(principal, item) or principal.is_admin


def can_toggle_privacy(principal: Optional[User], item: Any) -> bool:
    if not can_mutate(principal, item):
        return False
    return has_tier2_access(principal.tier, principal.admin_override) or principal.is_admin


def can_export(principal: Optional[User], item: Any) -> bool:
    if principal is None or not can_view(principal, item):
        return False
    return has_tier1_access(principal.tier, principal.admin_override) or principal.is_admin


def can_set_private(principal: Optional[User]) -> bool:
    """Whether the principal may store content as private at all."""
    if principal is None:
        return False
    return has_tier2_access(principal.tier, principal.admin_override) or principal.is_admin


def ensure_can_view(principal: Optional[User], item: Any, kind: str) -> None:
    if not can_view(principal, item):
        raise Forbidden(f"You do not have permission to view this {kind}")


def ensure_can_mutate(principal: Optional[User], item: Any, kind: str, action: str = "update") -> None:
    if not can_mutate(principal, item):
        raise Forbidden(f"You do not have permission to {action} this {kind}")


def ensure_can_toggle_privacy(principal: Optional[User], item: Any, kind: str) -> None:
    ensure_can_mutate(principal, item, kind)
    if not can_toggle_privacy(principal, item):
        logger.info(f"Privacy toggle denied for user {principal.id} on {kind} {getattr(item, 'id', None)}")
        raise PrivacyTierRequired()


def ensure_can_export(principal: Optional[User], item: Any, kind: str) -> None:
    ensure_can_view(principal, item, kind)
    if not can_export(principal, item):
        raise Forbidden("Export functionality is only available for Tier 1 and Tier 2 subscribers")


def ensure_privacy_allowed(principal: Optional[User], is_private: Optional[bool]) -> None:
    """Free and tier-1 content is forced public; reject attempts to store it private."""
    if is_private and not can_set_private(principal):
        raise PrivacyTierRequired()


def visible_clause(principal: Optional[User], model):
    """SQL form of the view rules for listings and search.

    Public rows, plus the principal's own rows. Admins get no extra rows here.
    """
    public = or_(model.is_private.is_(None), model.is_private.is_(False))
    if principal is None:
        return public
    return or_(model.user_id == principal.id, public)
