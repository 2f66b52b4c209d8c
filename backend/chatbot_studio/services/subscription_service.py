"""
Plan catalog and subscription service.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from chatbot_studio.core.config import settings
from chatbot_studio.core.exceptions import ConflictException, NotFoundException
from chatbot_studio.models.subscription import Plan, Subscription

logger = logging.getLogger(__name__)


class SubscriptionService:
    """Plans and per-user subscriptions."""

    @staticmethod
    async def list_active_plans(db: AsyncSession) -> list[Plan]:
        """Active plans, cheapest first."""
        result = await db.execute(
            select(Plan)
            .where(Plan.active.is_(True))
            .order_by(Plan.price.asc(), Plan.name.asc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def create_plan(
        db: AsyncSession,
        name: str,
        slug: str,
        price: int,
        description: Optional[str] = None,
        interval: str = "month",
        max_bots: int = 1,
        max_messages: int = 1000,
        features: Optional[list[str]] = None,
        active: bool = True,
    ) -> Plan:
        """
        Add a plan to the catalog.

        Raises:
            ConflictException: If the slug is taken
        """
        existing = await db.execute(select(Plan).where(Plan.slug == slug))
        if existing.scalar_one_or_none():
            raise ConflictException(f"Plan '{slug}' already exists")

        plan = Plan(
            name=name,
            slug=slug,
            price=price,
            description=description,
            interval=interval,
            max_bots=max_bots,
            max_messages=max_messages,
            features=features or [],
            active=active,
        )
        db.add(plan)
        await db.commit()
        await db.refresh(plan)
        return plan

    @staticmethod
    async def get_current(
        db: AsyncSession,
        user_id: str,
    ) -> Optional[Subscription]:
        """The user's most recent subscription with its plan, if any."""
        result = await db.execute(
            select(Subscription)
            .where(Subscription.user_id == user_id)
            .options(selectinload(Subscription.plan))
            .order_by(Subscription.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def subscribe(
        db: AsyncSession,
        user_id: str,
        plan_id: str,
    ) -> Subscription:
        """
        Start a subscription period on a plan.

        Raises:
            NotFoundException: If the plan is missing or inactive
        """
        plan = await db.get(Plan, plan_id)
        if plan is None or not plan.active:
            raise NotFoundException("Plan")

        now = datetime.utcnow()
        subscription = Subscription(
            user_id=user_id,
            plan_id=plan.id,
            current_period_start=now,
            current_period_end=now + timedelta(days=settings.subscription_period_days),
        )
        db.add(subscription)
        await db.commit()

        logger.info(f"User {user_id} subscribed to plan {plan.slug}")
        return await SubscriptionService.get_by_id(db, subscription.id, user_id)

    @staticmethod
    async def get_by_id(
        db: AsyncSession,
        subscription_id: str,
        user_id: str,
    ) -> Optional[Subscription]:
        result = await db.execute(
            select(Subscription)
            .where(Subscription.id == subscription_id, Subscription.user_id == user_id)
            .options(selectinload(Subscription.plan))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def cancel(
        db: AsyncSession,
        subscription_id: str,
        user_id: str,
    ) -> Optional[Subscription]:
        """Cancel at the end of the current period."""
        subscription = await SubscriptionService.get_by_id(db, subscription_id, user_id)
        if not subscription:
            return None

        subscription.cancel_at_period_end = True
        await db.commit()

        logger.info(f"Subscription {subscription_id} set to cancel at period end")
        return subscription
