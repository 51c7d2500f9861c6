"""Subscription tier transitions.

Downgrades always succeed locally, even when the provider cancellation fails.
Upgrades only touch the user row after every billing call has succeeded.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..billing import BillingError, BillingGateway, BillingSubscription
from ..errors import BillingFailure, PaymentMethodRequired, ValidationFailed
from ..models import Tier, User
from ..settings import settings
from .plans import get_plan

logger = logging.getLogger("recipebox.subscriptions")

PURCHASABLE_TIERS = (Tier.FREE, Tier.TIER1, Tier.TIER2)


def price_id_for(tier: Tier) -> str:
    price_ids = {
        Tier.TIER1: settings.stripe_price_tier1,
        Tier.TIER2: settings.stripe_price_tier2,
    }
    price_id = price_ids.get(tier)
    if not price_id:
        raise BillingFailure(f"No price configured for tier {int(tier)}")
    return price_id


def subscription_summary(user: User) -> dict:
    return {
        "user": {
            "subscription_tier": user.subscription_tier,
            "subscription_status": user.subscription_status,
            "subscription_expires_at": user.subscription_expires_at,
            "admin_override": user.admin_override,
        },
        "subscription": get_plan(user.tier).to_dict(),
    }


def downgrade_to_free(db: Session, user: User, billing: BillingGateway) -> User:
    if user.stripe_subscription_id:
        try:
            billing.cancel_subscription(user.stripe_subscription_id)
        except Exception as e:
            # Intent is honoured locally regardless of the provider outcome
            logger.warning(
                f"Failed to cancel billing subscription {user.stripe_subscription_id} "
                f"for user {user.id}: {e}"
            )

    user.subscription_tier = int(Tier.FREE)
    user.subscription_status = "active"
    user.stripe_subscription_id = None
    user.subscription_expires_at = None
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.id} downgraded to free tier")
    return user


def _provision(user: User, tier: Tier, payment_method_id: str, billing: BillingGateway) -> tuple[str, BillingSubscription]:
    price_id = price_id_for(tier)

    customer_id = user.stripe_customer_id
    if not customer_id:
        customer_id = billing.create_customer(
            email=user.email,
            name=user.name,
            payment_method_id=payment_method_id,
        )
    else:
        billing.update_customer(customer_id, payment_method_id=payment_method_id)

    if not user.stripe_subscription_id:
        return customer_id, billing.create_subscription(customer_id=customer_id, price_id=price_id)

    current = billing.retrieve_subscription(user.stripe_subscription_id)
    if current.is_active and current.item_id:
        updated = billing.update_subscription(
            current.subscription_id, item_id=current.item_id, price_id=price_id
        )
        return customer_id, updated

    # Previous subscription was cancelled or lapsed: start a new one
    return customer_id, billing.create_subscription(customer_id=customer_id, price_id=price_id)


def upgrade(
    db: Session,
    user: User,
    tier: Tier,
    payment_method_id: Optional[str],
    billing: BillingGateway,
) -> User:
    if not payment_method_id:
        raise PaymentMethodRequired()

    try:
        customer_id, subscription = _provision(user, tier, payment_method_id, billing)
    except BillingError as e:
        logger.error(f"Billing failed while moving user {user.id} to tier {int(tier)}: {e}")
        raise BillingFailure(str(e), details={"code": e.code}) from e

    user.stripe_customer_id = customer_id
    user.stripe_subscription_id = subscription.subscription_id
    user.subscription_tier = int(tier)
    user.subscription_status = subscription.status
    user.subscription_expires_at = subscription.current_period_end
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.id} moved to tier {int(tier)} (status={subscription.status})")
    return user


def change_tier(
    db: Session,
    user: User,
    tier: int,
    payment_method_id: Optional[str],
    billing: BillingGateway,
) -> User:
    """Move a user to `tier` (0, 1 or 2)."""
    try:
        target = Tier.from_value(tier)
    except ValueError:
        target = None
    if target not in PURCHASABLE_TIERS:
        raise ValidationFailed(f"Invalid subscription tier: {tier}", details={"tier": tier})

    if target == Tier.FREE:
        return downgrade_to_free(db, user, billing)
    return upgrade(db, user, target, payment_method_id, billing)
