"""Administrative user management and statistics."""

import logging
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import NotFound, ValidationFailed
from ..models import Cookbook, Recipe, Tier, User
from .quotas import cookbook_count, recipe_count

logger = logging.getLogger("recipebox.admin")

ADMIN_STATUSES = ("active", "canceled", "trial")

TIER_BUCKETS = {
    Tier.FREE: "free",
    Tier.TIER1: "tier1",
    Tier.TIER2: "tier2",
    Tier.ADMIN: "admin",
}


def get_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("user", user_id)
    return user


def list_users(
    db: Session,
    *,
    subscription_tier: Optional[int] = None,
    email: Optional[str] = None,
    limit: int = 15,
    offset: int = 0,
) -> list[User]:
    query = select(User)
    if subscription_tier is not None:
        query = query.where(User.subscription_tier == subscription_tier)
    if email:
        query = query.where(User.email.ilike(f"%{email}%"))
    return list(db.scalars(query.order_by(User.created_at, User.id).offset(offset).limit(limit)))


def user_details(db: Session, user_id: str) -> dict:
    user = get_user(db, user_id)
    return {
        "user": user,
        "recipe_count": recipe_count(db, user),
        "cookbook_count": cookbook_count(db, user),
    }


def update_user(db: Session, user_id: str, data: dict[str, Any]) -> User:
    user = get_user(db, user_id)

    if "subscription_tier" in data:
        try:
            Tier.from_value(data["subscription_tier"])
        except ValueError:
            raise ValidationFailed(f"Invalid subscription tier: {data['subscription_tier']}")
    if "subscription_status" in data and data["subscription_status"] not in ADMIN_STATUSES:
        raise ValidationFailed(
            f"subscription_status must be one of: {', '.join(ADMIN_STATUSES)}"
        )

    for field, value in data.items():
        setattr(user, field, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationFailed("Email is already in use")
    db.refresh(user)
    logger.info(f"Admin updated user {user.id}: {sorted(data)}")
    return user


def toggle_admin_override(db: Session, user_id: str) -> User:
    user = get_user(db, user_id)
    user.admin_override = not user.admin_override
    db.commit()
    db.refresh(user)
    logger.info(f"Admin override for user {user.id} set to {user.admin_override}")
    return user


def system_statistics(db: Session) -> dict:
    tier_counts = {bucket: 0 for bucket in TIER_BUCKETS.values()}
    rows = db.execute(
        select(User.subscription_tier, func.count()).group_by(User.subscription_tier)
    ).all()
    for tier, count in rows:
        try:
            bucket = TIER_BUCKETS[Tier.from_value(tier)]
        except ValueError:
            continue
        tier_counts[bucket] = count

    return {
        "total_users": db.scalar(select(func.count()).select_from(User)) or 0,
        "total_recipes": db.scalar(select(func.count()).select_from(Recipe)) or 0,
        "total_cookbooks": db.scalar(select(func.count()).select_from(Cookbook)) or 0,
        "users_by_tier": tier_counts,
    }
