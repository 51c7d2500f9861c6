"""Static subscription plan catalog (read-only reference data)."""

from __future__ import annotations

from dataclasses import dataclass

from ..models import Tier


@dataclass(frozen=True)
class SubscriptionPlan:
    tier: Tier
    name: str
    description: str
    features: tuple[str, ...]
    price: float

    def to_dict(self) -> dict:
        return {
            "tier": int(self.tier),
            "name": self.name,
            "description": self.description,
            "features": list(self.features),
            "price": self.price,
        }


PLANS: dict[Tier, SubscriptionPlan] = {
    Tier.FREE: SubscriptionPlan(
        tier=Tier.FREE,
        name="Free Tier",
        description="Basic recipe management for casual cooks",
        features=(
            "Create up to 25 recipes (all recipes are publicly viewable)",
            "Basic recipe details (ingredients, instructions)",
            "Create 1 cookbook (publicly viewable)",
            "Print individual recipes",
            "Basic search functionality",
        ),
        price=0.0,
    ),
    Tier.TIER1: SubscriptionPlan(
        tier=Tier.TIER1,
        name="Enthusiast",
        description="Enhanced features for enthusiast cooks",
        features=(
            "Unlimited recipes (all recipes are publicly viewable)",
            "Enhanced recipe details (nutritional info, notes)",
            "Create up to 10 cookbooks (publicly viewable)",
            "Advanced search and filtering",
            "Print cookbooks with table of contents",
            "Export recipes in multiple formats",
        ),
        price=9.99,
    ),
    Tier.TIER2: SubscriptionPlan(
        tier=Tier.TIER2,
        name="Professional",
        description="Professional features for serious chefs",
        features=(
            "All Tier 1 features",
            "Advanced recipe categorization",
            "Unlimited cookbooks",
            "Custom cookbook templates",
            "Recipe scaling functionality",
            "Meal planning features",
            "Inventory management",
            "Privacy controls (ability to make recipes and cookbooks private or public)",
        ),
        price=19.99,
    ),
    Tier.ADMIN: SubscriptionPlan(
        tier=Tier.ADMIN,
        name="Administrator",
        description="Full system access for administrators",
        features=(
            "All features of all tiers",
            "User management",
            "System administration",
            "Subscription management",
        ),
        price=0.0,
    ),
}


def get_plan(tier: int) -> SubscriptionPlan:
    return PLANS[Tier.from_value(tier)]


def public_plans() -> list[SubscriptionPlan]:
    """Plans offered to regular users (admin tier hidden)."""
    return [plan for tier, plan in sorted(PLANS.items()) if tier != Tier.ADMIN]


def all_plans() -> list[SubscriptionPlan]:
    return [plan for _, plan in sorted(PLANS.items())]
