"""Cookbooks API router.

Endpoints:
- GET /api/cookbooks - List the caller's cookbooks
- GET /api/cookbooks/public - List public cookbooks
- POST /api/cookbooks - Create cookbook (quota checked)
- GET /api/cookbooks/{id} - Cookbook with its recipes in display order
- PATCH /api/cookbooks/{id} - Update cookbook
- DELETE /api/cookbooks/{id} - Delete cookbook
- POST /api/cookbooks/{id}/privacy - Toggle privacy
- POST /api/cookbooks/{id}/recipes - Append recipes
- DELETE /api/cookbooks/{id}/recipes/{recipe_id} - Remove a recipe
- PUT /api/cookbooks/{id}/recipes/order - Reorder recipes
- GET /api/cookbooks/{id}/export/{format} - Download as text
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import get_current_user, get_current_user_optional
from ..models import Cookbook, User
from ..schemas import (
    CookbookAddRecipes,
    CookbookCreate,
    CookbookDetailOut,
    CookbookOut,
    CookbookPatch,
    CookbookRecipeOut,
    CookbookReorder,
    RecipeOut,
)
from ..services import access, export
from ..services import cookbooks as cookbook_service
from .recipes import attachment, check_export_format

router = APIRouter()
logger = logging.getLogger("recipebox.cookbooks")


def _visible_entries(db: Session, principal: Optional[User], cookbook: Cookbook):
    # Private recipes of other users stay hidden even inside a public cookbook
    return [
        entry for entry in cookbook_service.materialize(db, cookbook)
        if access.can_view(principal, entry.recipe)
    ]


def _cookbook_to_detail(db: Session, principal: Optional[User], cookbook: Cookbook) -> CookbookDetailOut:
    recipes = [
        CookbookRecipeOut(**RecipeOut.model_validate(entry.recipe).model_dump(), order=entry.order)
        for entry in _visible_entries(db, principal, cookbook)
    ]
    return CookbookDetailOut(**CookbookOut.model_validate(cookbook).model_dump(), recipes=recipes)


@router.get("/cookbooks", response_model=list[CookbookOut])
def list_cookbooks(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return cookbook_service.list_user_cookbooks(db, user, limit=limit, offset=offset)


@router.get("/cookbooks/public", response_model=list[CookbookOut])
def list_public_cookbooks(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    return cookbook_service.list_public_cookbooks(db, limit=limit, offset=offset)


@router.post("/cookbooks", response_model=CookbookDetailOut, status_code=201)
def create_cookbook(
    data: CookbookCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    cookbook = cookbook_service.create_cookbook(db, user, data.model_dump(exclude_none=True))
    return _cookbook_to_detail(db, user, cookbook)


@router.get("/cookbooks/{cookbook_id}", response_model=CookbookDetailOut)
def get_cookbook(
    cookbook_id: str,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user_optional),
):
    cookbook = cookbook_service.view_cookbook(db, user, cookbook_id)
    return _cookbook_to_detail(db, user, cookbook)


@router.patch("/cookbooks/{cookbook_id}", response_model=CookbookOut)
def patch_cookbook(
    cookbook_id: str,
    data: CookbookPatch,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return cookbook_service.update_cookbook(db, user, cookbook_id, data.model_dump(exclude_unset=True))


@router.delete("/cookbooks/{cookbook_id}", status_code=204)
def delete_cookbook(
    cookbook_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    cookbook_service.delete_cookbook(db, user, cookbook_id)
    return Response(status_code=204)


@router.post("/cookbooks/{cookbook_id}/privacy", response_model=CookbookOut)
def toggle_privacy(
    cookbook_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return cookbook_service.toggle_cookbook_privacy(db, user, cookbook_id)


@router.post("/cookbooks/{cookbook_id}/recipes", response_model=CookbookDetailOut)
def add_recipes(
    cookbook_id: str,
    data: CookbookAddRecipes,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    cookbook = cookbook_service.add_recipes(db, user, cookbook_id, data.recipe_ids)
    return _cookbook_to_detail(db, user, cookbook)


@router.delete("/cookbooks/{cookbook_id}/recipes/{recipe_id}", response_model=CookbookDetailOut)
def remove_recipe(
    cookbook_id: str,
    recipe_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    cookbook = cookbook_service.remove_recipe(db, user, cookbook_id, recipe_id)
    return _cookbook_to_detail(db, user, cookbook)


@router.put("/cookbooks/{cookbook_id}/recipes/order", response_model=CookbookDetailOut)
def reorder_recipes(
    cookbook_id: str,
    data: CookbookReorder,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    cookbook = cookbook_service.reorder_recipes(db, user, cookbook_id, data.recipe_order)
    return _cookbook_to_detail(db, user, cookbook)


@router.get("/cookbooks/{cookbook_id}/export/{format}")
def export_cookbook(
    cookbook_id: str,
    format: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    check_export_format(format)
    cookbook = cookbook_service.view_cookbook(db, user, cookbook_id)
    access.ensure_can_export(user, cookbook, "cookbook")
    recipes = [entry.recipe for entry in _visible_entries(db, user, cookbook)]
    logger.info(f"User {user.id} exported cookbook {cookbook.id} ({len(recipes)} recipes)")
    return attachment(export.cookbook_text(cookbook, recipes), f"cookbook_{cookbook.id}.{format}")
