"""Recipe persistence with quota, access and privacy checks."""

import logging
from typing import Any, Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from ..errors import NotFound
from ..models import Recipe, User
from . import access, metadata
from .quotas import ensure_can_create_recipe

logger = logging.getLogger("recipebox.recipes")


def get_recipe(db: Session, recipe_id: str) -> Recipe:
    recipe = db.get(Recipe, recipe_id)
    if recipe is None:
        raise NotFound("recipe", recipe_id)
    return recipe


def view_recipe(db: Session, principal: Optional[User], recipe_id: str) -> Recipe:
    recipe = get_recipe(db, recipe_id)
    access.ensure_can_view(principal, recipe, "recipe")
    return recipe


def list_user_recipes(db: Session, user: User, *, limit: int = 50, offset: int = 0) -> list[Recipe]:
    return list(
        db.scalars(
            select(Recipe)
            .where(Recipe.user_id == user.id)
            .order_by(Recipe.created_at.desc(), Recipe.id)
            .offset(offset)
            .limit(limit)
        )
    )


def list_public_recipes(db: Session, *, limit: int = 50, offset: int = 0) -> list[Recipe]:
    return list(
        db.scalars(
            select(Recipe)
            .where(access.visible_clause(None, Recipe))
            .order_by(Recipe.created_at.desc(), Recipe.id)
            .offset(offset)
            .limit(limit)
        )
    )


def search_recipes(
    db: Session,
    query: str,
    principal: Optional[User],
    *,
    limit: int = 50,
    offset: int = 0,
) -> list[Recipe]:
    """Simple text match restricted to what the requester may see."""
    pattern = f"%{query}%"
    return list(
        db.scalars(
            select(Recipe)
            .where(access.visible_clause(principal, Recipe))
            .where(
                or_(
                    Recipe.name.ilike(pattern),
                    Recipe.ingredients.ilike(pattern),
                    Recipe.instructions.ilike(pattern),
                )
            )
            .order_by(Recipe.created_at.desc(), Recipe.id)
            .offset(offset)
            .limit(limit)
        )
    )


def create_recipe(db: Session, user: User, data: dict[str, Any]) -> Recipe:
    access.ensure_privacy_allowed(user, data.get("is_private"))
    metadata.validate_references(db, data)
    ensure_can_create_recipe(db, user)

    recipe = Recipe(user_id=user.id, **data)
    db.add(recipe)
    db.commit()
    db.refresh(recipe)
    logger.info(f"Created recipe {recipe.id} for user {user.id}")
    return recipe


def update_recipe(db: Session, principal: User, recipe_id: str, data: dict[str, Any]) -> Recipe:
    recipe = get_recipe(db, recipe_id)
    access.ensure_can_mutate(principal, recipe, "recipe")
    if "is_private" in data and bool(data["is_private"]) != bool(recipe.is_private):
        access.ensure_can_toggle_privacy(principal, recipe, "recipe")
    metadata.validate_references(db, data)

    for field, value in data.items():
        setattr(recipe, field, value)
    db.commit()
    db.refresh(recipe)
    return recipe


def delete_recipe(db: Session, principal: User, recipe_id: str) -> None:
    recipe = get_recipe(db, recipe_id)
    access.ensure_can_mutate(principal, recipe, "recipe", action="delete")
    db.delete(recipe)
    db.commit()
    logger.info(f"Deleted recipe {recipe_id}")


def toggle_recipe_privacy(db: Session, principal: User, recipe_id: str) -> Recipe:
    recipe = get_recipe(db, recipe_id)
    access.ensure_can_toggle_privacy(principal, recipe, "recipe")
    recipe.is_private = not recipe.is_private
    db.commit()
    db.refresh(recipe)
    return recipe
