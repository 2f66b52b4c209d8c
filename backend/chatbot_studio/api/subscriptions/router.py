"""
Subscription and plan API router.
"""
from typing import Optional

from fastapi import APIRouter, status

from chatbot_studio.api.deps import AdminUser, CurrentUser, DbSession
from chatbot_studio.api.subscriptions.schemas import (
    CreatePlanRequest,
    PlanResponse,
    SubscribeRequest,
    SubscriptionResponse,
)
from chatbot_studio.core.exceptions import NotFoundException
from chatbot_studio.services.subscription_service import SubscriptionService

router = APIRouter()


@router.get("/plans", response_model=list[PlanResponse])
async def list_plans(
    current_user: CurrentUser,
    db: DbSession,
) -> list[PlanResponse]:
    """List active plans, cheapest first."""
    plans = await SubscriptionService.list_active_plans(db)
    return [PlanResponse.model_validate(plan) for plan in plans]


@router.post("/plans", response_model=PlanResponse, status_code=status.HTTP_201_CREATED)
async def create_plan(
    request: CreatePlanRequest,
    admin: AdminUser,
    db: DbSession,
) -> PlanResponse:
    """
    Add a plan to the catalog.

    Raises:
        ForbiddenException: If the caller is not an admin
        ConflictException: If the slug is taken
    """
    plan = await SubscriptionService.create_plan(db=db, **request.model_dump())
    return PlanResponse.model_validate(plan)


@router.get("", response_model=Optional[SubscriptionResponse])
async def get_subscription(
    current_user: CurrentUser,
    db: DbSession,
) -> Optional[SubscriptionResponse]:
    """Get the user's latest subscription, or null."""
    subscription = await SubscriptionService.get_current(db, current_user.id)
    if subscription is None:
        return None
    return SubscriptionResponse.model_validate(subscription)


@router.post("", response_model=SubscriptionResponse, status_code=status.HTTP_201_CREATED)
async def subscribe(
    request: SubscribeRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> SubscriptionResponse:
    """Subscribe to a plan for one billing period."""
    subscription = await SubscriptionService.subscribe(db, current_user.id, request.plan_id)
    return SubscriptionResponse.model_validate(subscription)


@router.post("/{subscription_id}/cancel", response_model=SubscriptionResponse)
async def cancel_subscription(
    subscription_id: str,
    current_user: CurrentUser,
    db: DbSession,
) -> SubscriptionResponse:
    """Cancel a subscription at the end of its current period."""
    subscription = await SubscriptionService.cancel(db, subscription_id, current_user.id)
    if not subscription:
        raise NotFoundException("Subscription")
    return SubscriptionResponse.model_validate(subscription)
