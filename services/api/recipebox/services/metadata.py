"""Recipe metadata catalog: classifications, sources, meals, courses, preparations."""

import logging
from typing import Any, Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..errors import NotFound, ValidationFailed
from ..models import Classification, Course, Meal, Preparation, Source

logger = logging.getLogger("recipebox.metadata")

CATALOG = {
    "classifications": Classification,
    "sources": Source,
    "meals": Meal,
    "courses": Course,
    "preparations": Preparation,
}

DEFAULT_NAMES = {
    "classifications": [
        "Appetizer", "Breakfast", "Dessert", "Main Dish", "Salad",
        "Side Dish", "Soup", "Beverage", "Bread", "Snack",
    ],
    "sources": [
        "Family Recipe", "Magazine", "Internet", "Cookbook", "Friend",
        "Original Creation", "Restaurant", "TV Show", "Cooking Class",
    ],
    "meals": ["Breakfast", "Brunch", "Lunch", "Dinner", "Snack", "Dessert"],
    "courses": [
        "Appetizer", "Soup", "Salad", "Main Course", "Side Dish",
        "Dessert", "Beverage", "Bread",
    ],
    "preparations": [
        "Bake", "Boil", "Broil", "Fry", "Grill", "Roast", "Saute",
        "Slow Cook", "Steam", "No Cook", "Microwave", "Poach",
    ],
}

# Recipe field -> catalog it references
_SINGLE_REFS = {"source_id": Source, "classification_id": Classification}
_LIST_REFS = {"meal_ids": Meal, "course_ids": Course, "preparation_ids": Preparation}


def list_entries(db: Session, kind: str) -> list:
    model = CATALOG.get(kind)
    if model is None:
        raise NotFound("metadata catalog", kind)
    return list(db.scalars(select(model).order_by(model.name)))


def _missing_ids(db: Session, model, ids: Iterable[str]) -> list[str]:
    wanted = set(ids)
    if not wanted:
        return []
    found = set(db.scalars(select(model.id).where(model.id.in_(wanted))))
    return sorted(wanted - found)


def validate_references(db: Session, data: dict[str, Any]) -> None:
    """Reject recipe data pointing at catalog entries that do not exist."""
    invalid: dict[str, list[str]] = {}
    for field, model in _SINGLE_REFS.items():
        value = data.get(field)
        if value is not None:
            missing = _missing_ids(db, model, [value])
            if missing:
                invalid[field] = missing
    for field, model in _LIST_REFS.items():
        missing = _missing_ids(db, model, data.get(field) or [])
        if missing:
            invalid[field] = missing
    if invalid:
        raise ValidationFailed("Unknown recipe metadata", details={"invalid": invalid})


def seed_catalog(db: Session) -> int:
    """Insert any default catalog names not already present. Returns rows added."""
    added = 0
    for kind, names in DEFAULT_NAMES.items():
        model = CATALOG[kind]
        existing = set(db.scalars(select(model.name)))
        for name in names:
            if name not in existing:
                db.add(model(name=name))
                added += 1
    db.commit()
    if added:
        logger.info(f"Seeded {added} metadata catalog entries")
    return added
