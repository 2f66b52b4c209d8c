"""
Subscription and plan API schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from chatbot_studio.api.common import CamelModel
from chatbot_studio.models.subscription import SubscriptionStatus

SLUG_PATTERN = r"^[a-z0-9][a-z0-9-]*[a-z0-9]$"


class CreatePlanRequest(CamelModel):
    """Request schema for adding a plan (admin only)."""

    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=2, max_length=100, pattern=SLUG_PATTERN)
    description: Optional[str] = Field(default=None, max_length=1000)
    price: int = Field(..., ge=0, description="Price in cents")
    interval: str = Field(default="month", pattern=r"^(month|year)$")
    max_bots: int = Field(default=1, ge=0)
    max_messages: int = Field(default=1000, ge=0)
    features: list[str] = Field(default_factory=list)
    active: bool = True


class PlanResponse(CamelModel):
    """Response schema for a plan."""

    id: str
    name: str
    slug: str
    description: Optional[str] = None
    price: int
    interval: str
    max_bots: int
    max_messages: int
    features: list[str]
    active: bool
    created_at: datetime


class SubscribeRequest(CamelModel):
    """Request schema for subscribing to a plan."""

    plan_id: str = Field(..., min_length=1)


class SubscriptionResponse(CamelModel):
    """Response schema for a subscription with its plan."""

    id: str
    user_id: str
    plan_id: str
    status: SubscriptionStatus
    current_period_start: datetime
    current_period_end: datetime
    cancel_at_period_end: bool
    created_at: datetime
    plan: PlanResponse
