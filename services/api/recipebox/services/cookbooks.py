"""Cookbook persistence and ordered recipe membership.

Reference-list edits are read-modify-write against the cookbook row without
locking; two concurrent edits of the same cookbook can lose one update.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..errors import NotFound, ValidationFailed
from ..models import Cookbook, Recipe, User
from . import access
from .ordering import RecipeOrdering
from .quotas import ensure_can_create_cookbook

logger = logging.getLogger("recipebox.cookbooks")


@dataclass(frozen=True)
class CookbookEntry:
    """A resolved recipe together with its order in the cookbook."""

    recipe: Recipe
    order: int


def get_cookbook(db: Session, cookbook_id: str) -> Cookbook:
    cookbook = db.get(Cookbook, cookbook_id)
    if cookbook is None:
        raise NotFound("cookbook", cookbook_id)
    return cookbook


def view_cookbook(db: Session, principal: Optional[User], cookbook_id: str) -> Cookbook:
    cookbook = get_cookbook(db, cookbook_id)
    access.ensure_can_view(principal, cookbook, "cookbook")
    return cookbook


def list_user_cookbooks(db: Session, user: User, *, limit: int = 50, offset: int = 0) -> list[Cookbook]:
    return list(
        db.scalars(
            select(Cookbook)
            .where(Cookbook.user_id == user.id)
            .order_by(Cookbook.created_at.desc(), Cookbook.id)
            .offset(offset)
            .limit(limit)
        )
    )


def list_public_cookbooks(db: Session, *, limit: int = 50, offset: int = 0) -> list[Cookbook]:
    return list(
        db.scalars(
            select(Cookbook)
            .where(access.visible_clause(None, Cookbook))
            .order_by(Cookbook.created_at.desc(), Cookbook.id)
            .offset(offset)
            .limit(limit)
        )
    )


def _save_ordering(db: Session, cookbook: Cookbook, ordering: RecipeOrdering) -> Cookbook:
    cookbook.recipe_refs = ordering.to_json()
    db.commit()
    db.refresh(cookbook)
    return cookbook


def create_cookbook(db: Session, user: User, data: dict[str, Any]) -> Cookbook:
    data = dict(data)
    access.ensure_privacy_allowed(user, data.get("is_private"))

    refs = data.pop("recipe_refs", None) or []
    try:
        ordering = RecipeOrdering.from_json(refs)
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationFailed(f"Invalid recipe references: {e}")
    if len(set(ordering.recipe_ids())) != len(ordering):
        raise ValidationFailed("Duplicate recipe in cookbook")
    _ensure_recipes_usable(db, user, ordering.recipe_ids())

    ensure_can_create_cookbook(db, user)

    cookbook = Cookbook(user_id=user.id, recipe_refs=ordering.to_json(), **data)
    db.add(cookbook)
    db.commit()
    db.refresh(cookbook)
    logger.info(f"Created cookbook {cookbook.id} for user {user.id}")
    return cookbook


def update_cookbook(db: Session, principal: User, cookbook_id: str, data: dict[str, Any]) -> Cookbook:
    cookbook = get_cookbook(db, cookbook_id)
    access.ensure_can_mutate(principal, cookbook, "cookbook")
    if "is_private" in data and bool(data["is_private"]) != bool(cookbook.is_private):
        access.ensure_can_toggle_privacy(principal, cookbook, "cookbook")

    for field, value in data.items():
        setattr(cookbook, field, value)
    db.commit()
    db.refresh(cookbook)
    return cookbook


def delete_cookbook(db: Session, principal: User, cookbook_id: str) -> None:
    cookbook = get_cookbook(db, cookbook_id)
    access.ensure_can_mutate(principal, cookbook, "cookbook", action="delete")
    db.delete(cookbook)
    db.commit()
    logger.info(f"Deleted cookbook {cookbook_id}")


def toggle_cookbook_privacy(db: Session, principal: User, cookbook_id: str) -> Cookbook:
    cookbook = get_cookbook(db, cookbook_id)
    access.ensure_can_toggle_privacy(principal, cookbook, "cookbook")
    cookbook.is_private = not cookbook.is_private
    db.commit()
    db.refresh(cookbook)
    return cookbook


def _ensure_recipes_usable(db: Session, principal: User, recipe_ids: Iterable[str]) -> None:
    wanted = list(dict.fromkeys(recipe_ids))
    if not wanted:
        return
    found = {r.id: r for r in db.scalars(select(Recipe).where(Recipe.id.in_(wanted)))}
    for recipe_id in wanted:
        recipe = found.get(recipe_id)
        if recipe is None:
            raise NotFound("recipe", recipe_id)
        access.ensure_can_view(principal, recipe, "recipe")


def add_recipes(db: Session, principal: User, cookbook_id: str, recipe_ids: list[str]) -> Cookbook:
    cookbook = get_cookbook(db, cookbook_id)
    access.ensure_can_mutate(principal, cookbook, "cookbook")
    _ensure_recipes_usable(db, principal, recipe_ids)

    ordering = RecipeOrdering.from_json(cookbook.recipe_refs)
    updated = ordering.add_many(recipe_ids)
    if updated is ordering:
        return cookbook
    return _save_ordering(db, cookbook, updated)


def remove_recipe(db: Session, principal: User, cookbook_id: str, recipe_id: str) -> Cookbook:
    cookbook = get_cookbook(db, cookbook_id)
    access.ensure_can_mutate(principal, cookbook, "cookbook")

    ordering = RecipeOrdering.from_json(cookbook.recipe_refs)
    updated = ordering.remove(recipe_id)
    if updated is ordering:
        return cookbook
    return _save_ordering(db, cookbook, updated)


def reorder_recipes(db: Session, principal: User, cookbook_id: str, order_map: Mapping[str, int]) -> Cookbook:
    cookbook = get_cookbook(db, cookbook_id)
    access.ensure_can_mutate(principal, cookbook, "cookbook")

    ordering = RecipeOrdering.from_json(cookbook.recipe_refs)
    try:
        updated = ordering.reorder(order_map)
    except ValueError as e:
        raise ValidationFailed(str(e))
    return _save_ordering(db, cookbook, updated)


def materialize(db: Session, cookbook: Cookbook) -> list[CookbookEntry]:
    """Resolve references to recipes in display order.

    References to recipes that no longer exist are dropped silently.
    """
    ordering = RecipeOrdering.from_json(cookbook.recipe_refs).sorted()
    ids = ordering.recipe_ids()
    if not ids:
        return []
    found = {r.id: r for r in db.scalars(select(Recipe).where(Recipe.id.in_(ids)))}
    return [
        CookbookEntry(recipe=found[ref.recipe_id], order=ref.order)
        for ref in ordering
        if ref.recipe_id in found
    ]
