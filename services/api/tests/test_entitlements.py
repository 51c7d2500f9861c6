"""Tests for the tier entitlement policy."""

import pytest

from recipebox.models import Tier
from recipebox.services.entitlements import (
    FREE_COOKBOOK_LIMIT,
    FREE_RECIPE_LIMIT,
    TIER1_COOKBOOK_LIMIT,
    UNLIMITED,
    entitlements_for,
    has_tier1_access,
    has_tier2_access,
    is_admin,
    max_cookbooks,
    max_recipes,
    resolve_entitlements,
    within_quota,
)


@pytest.mark.parametrize("tier,override,expected", [
    (Tier.FREE, False, False),
    (Tier.FREE, True, True),
    (Tier.TIER1, False, True),
    (Tier.TIER2, False, True),
    (Tier.ADMIN, False, True),
])
def test_tier1_access(tier, override, expected):
    assert has_tier1_access(tier, override) is expected


@pytest.mark.parametrize("tier,override,expected", [
    (Tier.FREE, False, False),
    (Tier.TIER1, False, False),
    (Tier.TIER1, True, True),
    (Tier.TIER2, False, True),
    (Tier.ADMIN, False, True),
])
def test_tier2_access(tier, override, expected):
    assert has_tier2_access(tier, override) is expected


def test_only_tier_100_is_admin():
    assert is_admin(Tier.ADMIN)
    assert not is_admin(Tier.TIER2)


def test_recipe_limits():
    assert max_recipes(Tier.FREE) == FREE_RECIPE_LIMIT == 25
    assert max_recipes(Tier.FREE, admin_override=True) == UNLIMITED
    assert max_recipes(Tier.TIER1) == UNLIMITED
    assert max_recipes(Tier.TIER2) == UNLIMITED


def test_cookbook_limits():
    assert max_cookbooks(Tier.FREE) == FREE_COOKBOOK_LIMIT == 1
    assert max_cookbooks(Tier.TIER1) == TIER1_COOKBOOK_LIMIT == 10
    assert max_cookbooks(Tier.TIER1, admin_override=True) == UNLIMITED
    assert max_cookbooks(Tier.TIER2) == UNLIMITED
    assert max_cookbooks(Tier.ADMIN) == UNLIMITED


def test_free_recipe_quota_boundary():
    limit = max_recipes(Tier.FREE)
    assert all(within_quota(limit, count) for count in range(0, 25))
    assert not within_quota(limit, 25)
    assert not within_quota(limit, 40)


def test_unlimited_always_within_quota():
    assert within_quota(UNLIMITED, 10_000)


def test_resolve_entitlements_snapshot():
    ent = resolve_entitlements(1, admin_override=False)
    assert ent.tier == Tier.TIER1
    assert ent.to_dict() == {
        "tier": 1,
        "admin_override": False,
        "is_admin": False,
        "has_tier1_access": True,
        "has_tier2_access": False,
        "max_recipes": UNLIMITED,
        "max_cookbooks": 10,
    }


def test_unknown_tier_is_rejected():
    with pytest.raises(ValueError):
        resolve_entitlements(7)


def test_anonymous_has_no_entitlements():
    assert entitlements_for(None) is None


def test_entitlements_for_user(tier2_user):
    ent = entitlements_for(tier2_user)
    assert ent.has_tier2_access
    assert ent.max_cookbooks == UNLIMITED


def test_user_tier_drives_entitlements(make_user):
    user = make_user(Tier.TIER1)
    assert user.tier is Tier.TIER1
    assert entitlements_for(user).tier is Tier.TIER1

    user.subscription_tier = int(Tier.ADMIN)
    assert user.tier is Tier.ADMIN
    assert user.is_admin
    assert entitlements_for(user).max_cookbooks == UNLIMITED
