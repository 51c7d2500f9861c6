"""Administration API router. Every endpoint requires an admin principal.

Endpoints:
- GET /api/admin/users - List users (filter by tier / email)
- GET /api/admin/users/{id} - User with recipe and cookbook counts
- PATCH /api/admin/users/{id} - Edit profile and subscription fields
- POST /api/admin/users/{id}/override - Toggle admin override
- GET /api/admin/plans - Full plan catalog
- GET /api/admin/stats - System statistics
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import require_admin
from ..schemas import AdminUserDetailOut, AdminUserPatch, PlanOut, SystemStatsOut, UserOut
from ..services import admin as admin_service
from ..services.plans import all_plans

router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])


@router.get("/users", response_model=list[UserOut])
def list_users(
    subscription_tier: Optional[int] = Query(None),
    email: Optional[str] = Query(None),
    limit: int = Query(15, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    return admin_service.list_users(
        db, subscription_tier=subscription_tier, email=email, limit=limit, offset=offset
    )


@router.get("/users/{user_id}", response_model=AdminUserDetailOut)
def get_user(user_id: str, db: Session = Depends(get_db)):
    details = admin_service.user_details(db, user_id)
    return AdminUserDetailOut(
        user=UserOut.model_validate(details["user"]),
        recipe_count=details["recipe_count"],
        cookbook_count=details["cookbook_count"],
    )


@router.patch("/users/{user_id}", response_model=UserOut)
def patch_user(user_id: str, data: AdminUserPatch, db: Session = Depends(get_db)):
    return admin_service.update_user(db, user_id, data.model_dump(exclude_unset=True))


@router.post("/users/{user_id}/override", response_model=UserOut)
def toggle_override(user_id: str, db: Session = Depends(get_db)):
    return admin_service.toggle_admin_override(db, user_id)


@router.get("/plans", response_model=list[PlanOut])
def list_plans():
    return [plan.to_dict() for plan in all_plans()]


@router.get("/stats", response_model=SystemStatsOut)
def stats(db: Session = Depends(get_db)):
    return admin_service.system_statistics(db)
