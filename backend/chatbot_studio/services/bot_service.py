"""
Bot service for CRUD operations, publishing and intent/FAQ authoring.
"""
import logging
from typing import Any, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from chatbot_studio.models.bot import (
    Bot,
    DEFAULT_COLOR,
    DEFAULT_SYSTEM_PROMPT,
    DEFAULT_WELCOME_MESSAGE,
)
from chatbot_studio.models.conversation import Conversation
from chatbot_studio.models.document import Document
from chatbot_studio.models.knowledge import FAQ, Intent
from chatbot_studio.models.notification import Notification
from chatbot_studio.models.user import User
from chatbot_studio.services.email_service import EmailService

logger = logging.getLogger(__name__)

BOT_UPDATABLE_FIELDS = {
    "name",
    "description",
    "system_prompt",
    "welcome_message",
    "avatar",
    "color",
    "published",
}
INTENT_UPDATABLE_FIELDS = {"name", "patterns", "response", "enabled"}
FAQ_UPDATABLE_FIELDS = {"question", "answer", "category", "enabled"}

_COUNTED_RELATIONS = {
    "conversations": (Conversation, Conversation.bot_id),
    "documents": (Document, Document.bot_id),
    "intents": (Intent, Intent.bot_id),
    "faqs": (FAQ, FAQ.bot_id),
}


def _apply(obj: Any, fields: dict[str, Any], allowed: set[str]) -> None:
    for key, value in fields.items():
        if key in allowed:
            setattr(obj, key, value)


class BotManager:
    """Service for managing bots owned by a user."""

    @staticmethod
    async def create(
        db: AsyncSession,
        user_id: str,
        name: str,
        description: Optional[str] = None,
        system_prompt: Optional[str] = None,
        welcome_message: Optional[str] = None,
        color: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> Bot:
        """
        Create a new bot.

        Empty optional fields fall back to the defaults.

        Args:
            db: Database session
            user_id: Owner ID
            name: Bot name
            description: Optional description
            system_prompt: Optional system prompt
            welcome_message: Optional greeting, also the chat fallback reply
            color: Optional widget color
            avatar: Optional avatar URL

        Returns:
            Created bot
        """
        bot = Bot(
            user_id=user_id,
            name=name,
            description=description,
            system_prompt=system_prompt or DEFAULT_SYSTEM_PROMPT,
            welcome_message=welcome_message or DEFAULT_WELCOME_MESSAGE,
            color=color or DEFAULT_COLOR,
            avatar=avatar,
        )

        db.add(bot)
        await db.commit()
        await db.refresh(bot)

        logger.info(f"Created bot {bot.id} for user {user_id}")
        return bot

    @staticmethod
    async def get_by_id(
        db: AsyncSession,
        bot_id: str,
        user_id: Optional[str] = None,
    ) -> Optional[Bot]:
        """
        Get a bot by ID.

        Args:
            db: Database session
            bot_id: Bot ID
            user_id: Optional owner ID; other users' bots are not returned

        Returns:
            Bot or None
        """
        query = select(Bot).where(Bot.id == bot_id)
        if user_id:
            query = query.where(Bot.user_id == user_id)

        result = await db.execute(query)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_by_user(
        db: AsyncSession,
        user_id: str,
    ) -> list[Bot]:
        """List a user's bots, newest first."""
        result = await db.execute(
            select(Bot)
            .where(Bot.user_id == user_id)
            .order_by(Bot.created_at.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_counts(
        db: AsyncSession,
        bot_id: str,
        relations: tuple[str, ...] = ("conversations", "documents"),
    ) -> dict[str, int]:
        """
        Count a bot's related rows.

        Args:
            db: Database session
            bot_id: Bot ID
            relations: Names among conversations, documents, intents, faqs

        Returns:
            Dict of relation name to count
        """
        counts = {}
        for relation in relations:
            model, column = _COUNTED_RELATIONS[relation]
            counts[relation] = await db.scalar(
                select(func.count(model.id)).where(column == bot_id)
            ) or 0
        return counts

    @staticmethod
    async def update(
        db: AsyncSession,
        bot_id: str,
        user_id: str,
        fields: dict[str, Any],
    ) -> Optional[Bot]:
        """
        Apply a partial update to a bot.

        Args:
            db: Database session
            bot_id: Bot ID
            user_id: Owner ID (for ownership check)
            fields: Fields to change; unknown keys are ignored

        Returns:
            Updated bot or None if not found
        """
        bot = await BotManager.get_by_id(db, bot_id, user_id)
        if not bot:
            return None

        _apply(bot, fields, BOT_UPDATABLE_FIELDS)

        await db.commit()
        await db.refresh(bot)

        return bot

    @staticmethod
    async def delete(
        db: AsyncSession,
        bot_id: str,
        user_id: str,
    ) -> bool:
        """
        Delete a bot and everything it owns.

        Returns:
            True if deleted, False if not found
        """
        bot = await BotManager.get_by_id(db, bot_id, user_id)
        if not bot:
            return False

        await db.delete(bot)
        await db.commit()

        logger.info(f"Deleted bot {bot_id}")
        return True

    @staticmethod
    async def publish(
        db: AsyncSession,
        bot_id: str,
        user: User,
    ) -> Optional[Bot]:
        """
        Publish a bot so it starts accepting chat traffic.

        Records an in-app notification for the owner and, once committed,
        queues the bot-published email.

        Args:
            db: Database session
            bot_id: Bot ID
            user: Owner

        Returns:
            Published bot or None if not found
        """
        bot = await BotManager.get_by_id(db, bot_id, user.id)
        if not bot:
            return None

        bot.published = True
        db.add(
            Notification(
                user_id=user.id,
                type="bot_published",
                title="Bot published",
                message=f'Your bot "{bot.name}" is now live.',
            )
        )

        await db.commit()
        await db.refresh(bot)

        logger.info(f"Published bot {bot.id}")

        EmailService.send_bot_published(user.email, user.name, bot.id, bot.name)
        return bot


class KnowledgeService:
    """Service for a bot's intents and FAQs."""

    @staticmethod
    async def list_intents(db: AsyncSession, bot_id: str) -> list[Intent]:
        result = await db.execute(
            select(Intent)
            .where(Intent.bot_id == bot_id)
            .order_by(Intent.created_at.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_intent(
        db: AsyncSession,
        bot_id: str,
        intent_id: str,
    ) -> Optional[Intent]:
        result = await db.execute(
            select(Intent).where(Intent.id == intent_id, Intent.bot_id == bot_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def create_intent(
        db: AsyncSession,
        bot_id: str,
        name: str,
        patterns: list[str],
        response: str,
        enabled: bool = True,
    ) -> Intent:
        """
        Create an intent.

        Args:
            db: Database session
            bot_id: Owning bot ID
            name: Intent name
            patterns: Trigger substrings
            response: Reply used when a pattern matches
            enabled: Whether the matcher considers it

        Returns:
            Created intent
        """
        intent = Intent(
            bot_id=bot_id,
            name=name,
            patterns=patterns,
            response=response,
            enabled=enabled,
        )
        db.add(intent)
        await db.commit()
        await db.refresh(intent)
        return intent

    @staticmethod
    async def update_intent(
        db: AsyncSession,
        bot_id: str,
        intent_id: str,
        fields: dict[str, Any],
    ) -> Optional[Intent]:
        intent = await KnowledgeService.get_intent(db, bot_id, intent_id)
        if not intent:
            return None

        _apply(intent, fields, INTENT_UPDATABLE_FIELDS)

        await db.commit()
        await db.refresh(intent)
        return intent

    @staticmethod
    async def delete_intent(db: AsyncSession, bot_id: str, intent_id: str) -> bool:
        intent = await KnowledgeService.get_intent(db, bot_id, intent_id)
        if not intent:
            return False

        await db.delete(intent)
        await db.commit()
        return True

    @staticmethod
    async def list_faqs(db: AsyncSession, bot_id: str) -> list[FAQ]:
        result = await db.execute(
            select(FAQ)
            .where(FAQ.bot_id == bot_id)
            .order_by(FAQ.created_at.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_faq(
        db: AsyncSession,
        bot_id: str,
        faq_id: str,
    ) -> Optional[FAQ]:
        result = await db.execute(
            select(FAQ).where(FAQ.id == faq_id, FAQ.bot_id == bot_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def create_faq(
        db: AsyncSession,
        bot_id: str,
        question: str,
        answer: str,
        category: Optional[str] = None,
        enabled: bool = True,
    ) -> FAQ:
        """Create an FAQ whose question triggers the answer."""
        faq = FAQ(
            bot_id=bot_id,
            question=question,
            answer=answer,
            category=category,
            enabled=enabled,
        )
        db.add(faq)
        await db.commit()
        await db.refresh(faq)
        return faq

    @staticmethod
    async def update_faq(
        db: AsyncSession,
        bot_id: str,
        faq_id: str,
        fields: dict[str, Any],
    ) -> Optional[FAQ]:
        faq = await KnowledgeService.get_faq(db, bot_id, faq_id)
        if not faq:
            return None

        _apply(faq, fields, FAQ_UPDATABLE_FIELDS)

        await db.commit()
        await db.refresh(faq)
        return faq

    @staticmethod
    async def delete_faq(db: AsyncSession, bot_id: str, faq_id: str) -> bool:
        faq = await KnowledgeService.get_faq(db, bot_id, faq_id)
        if not faq:
            return False

        await db.delete(faq)
        await db.commit()
        return True
