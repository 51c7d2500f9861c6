"""Pydantic schemas for RecipeBox API.

Request/response models for:
- Users and subscriptions
- Recipes
- Cookbooks (with ordered recipe references)
- Admin views
- Metadata catalog entries
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


def _not_null(v):
    # Optional only so the field can be omitted; an explicit null is rejected
    if v is None:
        raise ValueError("may not be null")
    return v


# --- User ---

class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")

    _check_not_null = field_validator("name", "email")(_not_null)


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    subscription_tier: int
    subscription_status: str
    subscription_expires_at: Optional[datetime]
    admin_override: bool
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class EntitlementsOut(BaseModel):
    tier: int
    admin_override: bool
    is_admin: bool
    has_tier1_access: bool
    has_tier2_access: bool
    max_recipes: int
    max_cookbooks: int


# --- Subscription ---

class PlanOut(BaseModel):
    tier: int
    name: str
    description: str
    features: list[str]
    price: float


class SubscriptionStateOut(BaseModel):
    subscription_tier: int
    subscription_status: str
    subscription_expires_at: Optional[datetime]
    admin_override: bool


class SubscriptionOut(BaseModel):
    user: SubscriptionStateOut
    subscription: PlanOut


class SubscriptionUpdate(BaseModel):
    subscription_tier: int = Field(..., ge=0, le=2)
    payment_method_id: Optional[str] = None


class ProfileOut(BaseModel):
    user: UserOut
    recipe_count: int
    cookbook_count: int
    entitlements: EntitlementsOut
    subscription: PlanOut


# --- Recipe ---

class RecipeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    ingredients: str = Field(..., min_length=1)
    instructions: str = Field(..., min_length=1)
    notes: Optional[str] = None
    servings: Optional[int] = Field(None, ge=1)
    tags: Optional[list[str]] = None
    calories: Optional[int] = Field(None, ge=0)
    fat: Optional[float] = Field(None, ge=0)
    cholesterol: Optional[float] = Field(None, ge=0)
    sodium: Optional[float] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0)
    is_private: Optional[bool] = None
    source_id: Optional[str] = None
    classification_id: Optional[str] = None
    meal_ids: Optional[list[str]] = None
    course_ids: Optional[list[str]] = None
    preparation_ids: Optional[list[str]] = None
    marked: Optional[bool] = None
    date_added: Optional[datetime] = None


class RecipePatch(BaseModel):
    """Partial update - all fields optional."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    ingredients: Optional[str] = Field(None, min_length=1)
    instructions: Optional[str] = Field(None, min_length=1)
    notes: Optional[str] = None
    servings: Optional[int] = Field(None, ge=1)
    tags: Optional[list[str]] = None
    calories: Optional[int] = Field(None, ge=0)
    fat: Optional[float] = Field(None, ge=0)
    cholesterol: Optional[float] = Field(None, ge=0)
    sodium: Optional[float] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0)
    is_private: Optional[bool] = None
    source_id: Optional[str] = None
    classification_id: Optional[str] = None
    meal_ids: Optional[list[str]] = None
    course_ids: Optional[list[str]] = None
    preparation_ids: Optional[list[str]] = None
    marked: Optional[bool] = None
    date_added: Optional[datetime] = None

    _check_not_null = field_validator(
        "name", "ingredients", "instructions",
        "meal_ids", "course_ids", "preparation_ids", "marked",
    )(_not_null)


class RecipeOut(BaseModel):
    id: str
    user_id: str
    name: str
    ingredients: str
    instructions: str
    notes: Optional[str]
    servings: Optional[int]
    tags: Optional[list[str]]
    calories: Optional[int]
    fat: Optional[float]
    cholesterol: Optional[float]
    sodium: Optional[float]
    protein: Optional[float]
    is_private: bool = False
    source_id: Optional[str] = None
    classification_id: Optional[str] = None
    meal_ids: list[str] = []
    course_ids: list[str] = []
    preparation_ids: list[str] = []
    marked: bool = False
    date_added: Optional[datetime] = None
    created_at: Optional[datetime]

    class Config:
        from_attributes = True

    @field_validator("is_private", mode="before")
    @classmethod
    def _unset_is_public(cls, v):
        return bool(v)


class CookbookRecipeOut(RecipeOut):
    """Recipe as listed inside a cookbook, with its order."""
    order: int


class MetadataOut(BaseModel):
    id: str
    name: str

    class Config:
        from_attributes = True


# --- Cookbook ---

class RecipeRefIn(BaseModel):
    recipe_id: str
    order: int = Field(..., ge=0)


class RecipeRefOut(BaseModel):
    recipe_id: str
    order: int


class CookbookCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    cover_image: Optional[str] = None
    recipe_refs: Optional[list[RecipeRefIn]] = None
    is_private: Optional[bool] = None


class CookbookPatch(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    cover_image: Optional[str] = None
    is_private: Optional[bool] = None

    _check_not_null = field_validator("name")(_not_null)


class CookbookOut(BaseModel):
    id: str
    user_id: str
    name: str
    description: Optional[str]
    cover_image: Optional[str]
    is_private: bool = False
    recipe_refs: list[RecipeRefOut]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True

    @field_validator("is_private", mode="before")
    @classmethod
    def _unset_is_public(cls, v):
        return bool(v)


class CookbookDetailOut(CookbookOut):
    recipes: list[CookbookRecipeOut]


class CookbookAddRecipes(BaseModel):
    recipe_ids: list[str] = Field(..., min_length=1)


class CookbookReorder(BaseModel):
    recipe_order: dict[str, int]


# --- Admin ---

class AdminUserPatch(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    subscription_tier: Optional[int] = Field(None, ge=0, le=100)
    subscription_status: Optional[str] = None
    subscription_expires_at: Optional[datetime] = None

    _check_not_null = field_validator(
        "name", "email", "subscription_tier", "subscription_status"
    )(_not_null)


class AdminUserDetailOut(BaseModel):
    user: UserOut
    recipe_count: int
    cookbook_count: int


class SystemStatsOut(BaseModel):
    total_users: int
    total_recipes: int
    total_cookbooks: int
    users_by_tier: dict[str, int]
