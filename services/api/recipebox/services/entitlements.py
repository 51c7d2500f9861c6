"""Subscription tier entitlements.

Pure functions from (tier, admin_override) to capabilities and quotas.
Nothing here touches the database.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..models import Tier, User

UNLIMITED = -1

FREE_RECIPE_LIMIT = 25
FREE_COOKBOOK_LIMIT = 1
TIER1_COOKBOOK_LIMIT = 10


def is_admin(tier: int) -> bool:
    return tier == Tier.ADMIN


def has_tier1_access(tier: int, admin_override: bool = False) -> bool:
    return tier >= Tier.TIER1 or bool(admin_override)


def has_tier2_access(tier: int, admin_override: bool = False) -> bool:
    return tier >= Tier.TIER2 or bool(admin_override)


def max_recipes(tier: int, admin_override: bool = False) -> int:
    if admin_override:
        return UNLIMITED
    if tier == Tier.FREE:
        return FREE_RECIPE_LIMIT
    return UNLIMITED


def max_cookbooks(tier: int, admin_override: bool = False) -> int:
    if admin_override:
        return UNLIMITED
    if tier == Tier.FREE:
        return FREE_COOKBOOK_LIMIT
    if tier == Tier.TIER1:
        return TIER1_COOKBOOK_LIMIT
    return UNLIMITED


def within_quota(limit: int, count: int) -> bool:
    """True if one more item fits. UNLIMITED always passes."""
    if limit == UNLIMITED:
        return True
    return count < limit


@dataclass(frozen=True)
class Entitlements:
    """Snapshot of everything a tier grants."""

    tier: Tier
    admin_override: bool
    is_admin: bool
    has_tier1_access: bool
    has_tier2_access: bool
    max_recipes: int
    max_cookbooks: int

    def to_dict(self) -> dict:
        return {
            "tier": int(self.tier),
            "admin_override": self.admin_override,
            "is_admin": self.is_admin,
            "has_tier1_access": self.has_tier1_access,
            "has_tier2_access": self.has_tier2_access,
            "max_recipes": self.max_recipes,
            "max_cookbooks": self.max_cookbooks,
        }


def resolve_entitlements(tier: int, admin_override: bool = False) -> Entitlements:
    resolved = Tier.from_value(tier)
    override = bool(admin_override)
    return Entitlements(
        tier=resolved,
        admin_override=override,
        is_admin=is_admin(resolved),
        has_tier1_access=has_tier1_access(resolved, override),
        has_tier2_access=has_tier2_access(resolved, override),
        max_recipes=max_recipes(resolved, override),
        max_cookbooks=max_cookbooks(resolved, override),
    )


def entitlements_for(user: Optional[User]) -> Optional[Entitlements]:
    """Entitlements for a principal; None for anonymous callers."""
    if user is None:
        return None
    return resolve_entitlements(user.tier, user.admin_override)
