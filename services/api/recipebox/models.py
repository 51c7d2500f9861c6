"""SQLAlchemy ORM models for RecipeBox.

Tables:
- users: Account with subscription tier, billing references and admin override
- recipes: Recipe content owned by a single user
- cookbooks: Named collections holding an ordered list of recipe references
- classifications, sources, meals, courses, preparations: Recipe metadata catalog
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import IntEnum
from typing import Optional

from sqlalchemy import (
    String,
    DateTime,
    Text,
    Integer,
    Boolean,
    Float,
    ForeignKey,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func, false
from sqlalchemy.types import JSON

from .db import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


class Tier(IntEnum):
    """Subscription tier. Stored as a plain integer in `users.subscription_tier`."""

    FREE = 0
    TIER1 = 1
    TIER2 = 2
    ADMIN = 100

    @classmethod
    def from_value(cls, value: int | None) -> "Tier":
        if value is None:
            return cls.FREE
        return cls(int(value))


class User(Base):
    """Registered account.

    Recipe/cookbook counts are never stored; see services.quotas.
    """
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    subscription_tier: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    subscription_status: Mapped[str] = mapped_column(
        String(40), nullable=False, default="active", server_default="active"
    )
    subscription_expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    admin_override: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    # Billing references
    stripe_customer_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    stripe_subscription_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    recipes: Mapped[list["Recipe"]] = relationship(
        "Recipe", back_populates="owner", cascade="all, delete-orphan"
    )
    cookbooks: Mapped[list["Cookbook"]] = relationship(
        "Cookbook", back_populates="owner", cascade="all, delete-orphan"
    )

    @property
    def tier(self) -> Tier:
        return Tier.from_value(self.subscription_tier)

    @property
    def is_admin(self) -> bool:
        return self.tier == Tier.ADMIN


class Recipe(Base):
    """Recipe owned by exactly one user.

    `is_private` is nullable: NULL means "never set" and is treated as public.
    """
    __tablename__ = "recipes"
    __table_args__ = (
        Index("ix_recipes_user_id", "user_id"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    ingredients: Mapped[str] = mapped_column(Text, nullable=False)
    instructions: Mapped[str] = mapped_column(Text, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    servings: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    tags: Mapped[Optional[list[str]]] = mapped_column(JSON, nullable=True, default=list)

    # Nutrition
    calories: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    fat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    cholesterol: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    sodium: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    protein: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    is_private: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    # Metadata catalog references
    source_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("sources.id", ondelete="SET NULL"), nullable=True
    )
    classification_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("classifications.id", ondelete="SET NULL"), nullable=True
    )
    meal_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    course_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    preparation_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    marked: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    date_added: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    owner: Mapped["User"] = relationship("User", back_populates="recipes")
    source: Mapped[Optional["Source"]] = relationship("Source")
    classification: Mapped[Optional["Classification"]] = relationship("Classification")

    @property
    def has_nutrition(self) -> bool:
        return any([self.calories, self.fat, self.cholesterol, self.sodium, self.protein])


class Cookbook(Base):
    """Named collection of recipes.

    `recipe_refs` holds the ordered reference list as JSON:
    [{"recipe_id": "...", "order": 0}, ...]. Use services.ordering.RecipeOrdering
    to read and modify it.
    """
    __tablename__ = "cookbooks"
    __table_args__ = (
        Index("ix_cookbooks_user_id", "user_id"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cover_image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    is_private: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    recipe_refs: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    owner: Mapped["User"] = relationship("User", back_populates="cookbooks")


# --- Metadata catalog ---

class _LookupMixin:
    """Named catalog row referenced by recipes."""

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)


class Classification(_LookupMixin, Base):
    __tablename__ = "classifications"


class Source(_LookupMixin, Base):
    __tablename__ = "sources"


class Meal(_LookupMixin, Base):
    __tablename__ = "meals"


class Course(_LookupMixin, Base):
    __tablename__ = "courses"


class Preparation(_LookupMixin, Base):
    __tablename__ = "preparations"
