"""Recipes API router.

Endpoints:
- GET /api/recipes - List the caller's recipes
- GET /api/recipes/public - List public recipes
- GET /api/recipes/search - Search visible recipes
- POST /api/recipes - Create recipe (quota checked)
- GET /api/recipes/{id} - Get recipe
- PATCH /api/recipes/{id} - Update recipe
- DELETE /api/recipes/{id} - Delete recipe
- POST /api/recipes/{id}/privacy - Toggle privacy
- GET /api/recipes/{id}/export/{format} - Download as text
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import get_current_user, get_current_user_optional
from ..errors import ValidationFailed
from ..models import User
from ..schemas import RecipeCreate, RecipeOut, RecipePatch
from ..services import access, export
from ..services import recipes as recipe_service

router = APIRouter()
logger = logging.getLogger("recipebox.recipes")


def attachment(text: str, filename: str) -> PlainTextResponse:
    return PlainTextResponse(
        text,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def check_export_format(format: str) -> None:
    if format not in export.SUPPORTED_FORMATS:
        raise ValidationFailed(
            f"Unsupported export format: {format}",
            details={"supported": list(export.SUPPORTED_FORMATS)},
        )


@router.get("/recipes", response_model=list[RecipeOut])
def list_recipes(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return recipe_service.list_user_recipes(db, user, limit=limit, offset=offset)


@router.get("/recipes/public", response_model=list[RecipeOut])
def list_public_recipes(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    return recipe_service.list_public_recipes(db, limit=limit, offset=offset)


@router.get("/recipes/search", response_model=list[RecipeOut])
def search_recipes(
    query: str = Query(..., min_length=2),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user_optional),
):
    return recipe_service.search_recipes(db, query, user, limit=limit, offset=offset)


@router.post("/recipes", response_model=RecipeOut, status_code=201)
def create_recipe(
    data: RecipeCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return recipe_service.create_recipe(db, user, data.model_dump(exclude_none=True))


@router.get("/recipes/{recipe_id}", response_model=RecipeOut)
def get_recipe(
    recipe_id: str,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user_optional),
):
    return recipe_service.view_recipe(db, user, recipe_id)


@router.patch("/recipes/{recipe_id}", response_model=RecipeOut)
def patch_recipe(
    recipe_id: str,
    data: RecipePatch,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return recipe_service.update_recipe(db, user, recipe_id, data.model_dump(exclude_unset=True))


@router.delete("/recipes/{recipe_id}", status_code=204)
def delete_recipe(
    recipe_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    recipe_service.delete_recipe(db, user, recipe_id)
    return Response(status_code=204)


@router.post("/recipes/{recipe_id}/privacy", response_model=RecipeOut)
def toggle_privacy(
    recipe_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return recipe_service.toggle_recipe_privacy(db, user, recipe_id)


@router.get("/recipes/{recipe_id}/export/{format}")
def export_recipe(
    recipe_id: str,
    format: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    check_export_format(format)
    recipe = recipe_service.view_recipe(db, user, recipe_id)
    access.ensure_can_export(user, recipe, "recipe")
    logger.info(f"User {user.id} exported recipe {recipe.id}")
    return attachment(export.recipe_text(recipe), f"recipe_{recipe.id}.{format}")
