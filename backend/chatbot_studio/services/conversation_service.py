"""
Conversation service for the owner dashboard.
"""
import logging
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from chatbot_studio.models.bot import Bot
from chatbot_studio.models.conversation import Conversation, Message

logger = logging.getLogger(__name__)


class ConversationService:
    """Read and delete conversations on bots a user owns."""

    @staticmethod
    async def list_by_user(
        db: AsyncSession,
        user_id: str,
        bot_id: Optional[str] = None,
    ) -> list[tuple[Conversation, int]]:
        """
        List conversations on a user's bots, newest first.

        Args:
            db: Database session
            user_id: Owner ID
            bot_id: Optional bot filter

        Returns:
            List of (conversation, message count)
        """
        message_count = (
            select(func.count(Message.id))
            .where(Message.conversation_id == Conversation.id)
            .correlate(Conversation)
            .scalar_subquery()
        )
        query = (
            select(Conversation, message_count)
            .join(Bot, Conversation.bot_id == Bot.id)
            .where(Bot.user_id == user_id)
        )
        if bot_id:
            query = query.where(Conversation.bot_id == bot_id)

        query = query.order_by(Conversation.created_at.desc())
        result = await db.execute(query)
        return [(conversation, count or 0) for conversation, count in result.all()]

    @staticmethod
    async def get_by_id(
        db: AsyncSession,
        conversation_id: str,
        user_id: str,
        with_messages: bool = False,
    ) -> Optional[Conversation]:
        """
        Get a conversation on one of the user's bots.

        Messages are eagerly loaded oldest first when requested.
        """
        query = (
            select(Conversation)
            .join(Bot, Conversation.bot_id == Bot.id)
            .where(Conversation.id == conversation_id, Bot.user_id == user_id)
        )
        if with_messages:
            query = query.options(selectinload(Conversation.messages))

        result = await db.execute(query)
        return result.scalar_one_or_none()

    @staticmethod
    async def delete(
        db: AsyncSession,
        conversation_id: str,
        user_id: str,
    ) -> bool:
        """Delete a conversation with its messages and leads."""
        conversation = await ConversationService.get_by_id(db, conversation_id, user_id)
        if not conversation:
            return False

        await db.delete(conversation)
        await db.commit()

        logger.info(f"Deleted conversation {conversation_id}")
        return True
