"""Users, profile and subscription API router.

Endpoints:
- POST /api/users - Register a free-tier account
- GET /api/me - Profile with usage counts and entitlements
- PATCH /api/me - Update own name and email
- GET /api/me/subscription - Current subscription state
- PUT /api/me/subscription - Change subscription tier (Idempotency-Key required)
- GET /api/plans - Plan catalog
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from ..billing import BillingGateway
from ..db import get_db
from ..deps import get_billing, get_current_user
from ..infra.idempotency import idempotency_clear_key, idempotency_precheck, idempotency_store_result
from ..models import User
from ..schemas import (
    PlanOut,
    ProfileOut,
    ProfileUpdate,
    SubscriptionOut,
    SubscriptionUpdate,
    UserCreate,
    UserOut,
)
from ..services import subscriptions
from ..services import users as user_service
from ..services.entitlements import entitlements_for
from ..services.plans import get_plan, public_plans
from ..services.quotas import cookbook_count, recipe_count

router = APIRouter()

@router.post("/users", response_model=UserOut, status_code=201)
def register_user(data: UserCreate, db: Session = Depends(get_db)):
    return user_service.register_user(db, data.name, data.email)


@router.get("/me", response_model=ProfileOut)
def get_profile(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return ProfileOut(
        user=UserOut.model_validate(user),
        recipe_count=recipe_count(db, user),
        cookbook_count=cookbook_count(db, user),
        entitlements=entitlements_for(user).to_dict(),
        subscription=get_plan(user.tier).to_dict(),
    )


@router.patch("/me", response_model=UserOut)
def update_profile(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return user_service.update_profile(db, user, data.model_dump(exclude_unset=True))


@router.get("/me/subscription", response_model=SubscriptionOut)
def get_subscription(user: User = Depends(get_current_user)):
    return subscriptions.subscription_summary(user)


@router.put("/me/subscription", response_model=SubscriptionOut)
async def update_subscription(
    request: Request,
    data: SubscriptionUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    billing: BillingGateway = Depends(get_billing),
):
    """Move the caller to another tier. Retries with the same key replay the first result."""
    pre = await idempotency_precheck(request, user_id=user.id, route_key="subscription_update")
    if isinstance(pre, JSONResponse):
        return pre
    redis_key, req_hash, _ = pre

    try:
        await run_in_threadpool(
            subscriptions.change_tier,
            db, user, data.subscription_tier, data.payment_method_id, billing,
        )
        res = SubscriptionOut.model_validate(subscriptions.subscription_summary(user))
        await idempotency_store_result(redis_key, req_hash, status=200, body=res.model_dump(mode="json"))
        return res
    except Exception:
        await idempotency_clear_key(redis_key)
        raise


@router.get("/plans", response_model=list[PlanOut])
def list_plans():
    return [plan.to_dict() for plan in public_plans()]
