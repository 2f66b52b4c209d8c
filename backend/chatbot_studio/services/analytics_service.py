"""
Analytics service: daily counters and owner dashboards.
"""
import logging
from datetime import date, datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import select, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from chatbot_studio.models.analytics import Analytics, AnalyticsMetric
from chatbot_studio.models.bot import Bot
from chatbot_studio.models.conversation import Conversation, Message
from chatbot_studio.models.lead import Lead

logger = logging.getLogger(__name__)

METRICS_HISTORY_LIMIT = 30

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class AnalyticsService:
    """Service for analytics counters and overview statistics."""

    @staticmethod
    async def increment(
        db: AsyncSession,
        bot_id: str,
        metric: str,
        count: int = 1,
        stats_date: Optional[date] = None,
    ) -> None:
        """
        Atomically increment a per-day counter, creating it if absent.

        Issues a single INSERT ... ON CONFLICT DO UPDATE so concurrent
        increments for the same (bot, day, metric) never lose updates.

        Args:
            db: Database session
            bot_id: Bot ID
            metric: Counter name
            count: Amount to add
            stats_date: Day bucket (defaults to today)
        """
        stats_date = stats_date or date.today()

        dialect = db.bind.dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Atomic counter upsert not supported on {dialect}")

        stmt = insert(Analytics).values(
            id=str(uuid4()),
            bot_id=bot_id,
            date=stats_date,
            metric=metric,
            value=count,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["bot_id", "date", "metric"],
            set_={"value": Analytics.value + count},
        )
        await db.execute(stmt)

    @staticmethod
    async def increment_messages(
        db: AsyncSession,
        bot_id: str,
        count: int = 1,
    ) -> None:
        """Increment today's message counter for a bot."""
        await AnalyticsService.increment(db, bot_id, AnalyticsMetric.MESSAGES, count)

    @staticmethod
    async def get_counter(
        db: AsyncSession,
        bot_id: str,
        metric: str,
        stats_date: Optional[date] = None,
    ) -> int:
        result = await db.execute(
            select(Analytics.value).where(
                Analytics.bot_id == bot_id,
                Analytics.date == (stats_date or date.today()),
                Analytics.metric == metric,
            )
        )
        return result.scalar_one_or_none() or 0

    @staticmethod
    async def get_overview(
        db: AsyncSession,
        user_id: str,
        bot_id: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> dict:
        """
        Count conversations, messages and leads across a user's bots.

        Args:
            db: Database session
            user_id: Owner ID
            bot_id: Optional bot filter
            start_date: Optional lower bound on conversation creation
            end_date: Optional upper bound on conversation creation

        Returns:
            Dict with conversations, messages, leads counts
        """
        conversation_filters = [Bot.user_id == user_id]
        if bot_id:
            conversation_filters.append(Conversation.bot_id == bot_id)
        if start_date and end_date:
            conversation_filters.append(Conversation.created_at >= start_date)
            conversation_filters.append(Conversation.created_at <= end_date)

        conversations = await db.scalar(
            select(func.count(Conversation.id))
            .join(Bot, Conversation.bot_id == Bot.id)
            .where(*conversation_filters)
        )

        message_filters = [Bot.user_id == user_id]
        if bot_id:
            message_filters.append(Conversation.bot_id == bot_id)

        messages = await db.scalar(
            select(func.count(Message.id))
            .join(Conversation, Message.conversation_id == Conversation.id)
            .join(Bot, Conversation.bot_id == Bot.id)
            .where(*message_filters)
        )

        leads = await db.scalar(
            select(func.count(Lead.id))
            .join(Conversation, Lead.conversation_id == Conversation.id)
            .join(Bot, Conversation.bot_id == Bot.id)
            .where(Bot.user_id == user_id)
        )

        return {
            "conversations": conversations or 0,
            "messages": messages or 0,
            "leads": leads or 0,
        }

    @staticmethod
    async def get_metrics(
        db: AsyncSession,
        user_id: str,
        bot_id: Optional[str] = None,
    ) -> list[Analytics]:
        """Latest counter rows for a user's bots, newest day first."""
        query = (
            select(Analytics)
            .join(Bot, Analytics.bot_id == Bot.id)
            .where(Bot.user_id == user_id)
        )
        if bot_id:
            query = query.where(Analytics.bot_id == bot_id)

        query = query.order_by(Analytics.date.desc()).limit(METRICS_HISTORY_LIMIT)
        result = await db.execute(query)
        return list(result.scalars().all())
