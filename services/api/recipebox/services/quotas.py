"""Creation quotas.

Counts are always taken live from the database at call time. Callers run the
ensure_* check in the same request right before inserting; concurrent
requests can still race past the limit (accepted, last write wins).
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..errors import QuotaExceeded
from ..models import Cookbook, Recipe, User
from .entitlements import max_cookbooks, max_recipes, within_quota

logger = logging.getLogger("recipebox.quotas")


def recipe_count(db: Session, user: User) -> int:
    return db.scalar(
        select(func.count()).select_from(Recipe).where(Recipe.user_id == user.id)
    ) or 0


def cookbook_count(db: Session, user: User) -> int:
    return db.scalar(
        select(func.count()).select_from(Cookbook).where(Cookbook.user_id == user.id)
    ) or 0


def can_create_recipe(db: Session, user: User) -> bool:
    limit = max_recipes(user.tier, user.admin_override)
    return within_quota(limit, recipe_count(db, user))


def can_create_cookbook(db: Session, user: User) -> bool:
    limit = max_cookbooks(user.tier, user.admin_override)
    return within_quota(limit, cookbook_count(db, user))


def ensure_can_create_recipe(db: Session, user: User) -> None:
    limit = max_recipes(user.tier, user.admin_override)
    count = recipe_count(db, user)
    if not within_quota(limit, count):
        logger.info(f"Recipe quota reached for user {user.id} ({count}/{limit})")
        raise QuotaExceeded("recipe", limit=limit, count=count)


def ensure_can_create_cookbook(db: Session, user: User) -> None:
    limit = max_cookbooks(user.tier, user.admin_override)
    count = cookbook_count(db, user)
    if not within_quota(limit, count):
        logger.info(f"Cookbook quota reached for user {user.id} ({count}/{limit})")
        raise QuotaExceeded("cookbook", limit=limit, count=count)
