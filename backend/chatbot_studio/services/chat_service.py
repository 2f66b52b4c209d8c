"""
Chat service: the public conversation responder and widget config accessor.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chatbot_studio.core.config import settings
from chatbot_studio.core.exceptions import NotFoundException
from chatbot_studio.models.bot import Bot
from chatbot_studio.models.conversation import (
    Conversation,
    DEFAULT_SOURCE,
    Message,
    MessageRole,
)
from chatbot_studio.models.knowledge import FAQ, Intent
from chatbot_studio.services.analytics_service import AnalyticsService
from chatbot_studio.services.matcher import select_reply

logger = logging.getLogger(__name__)


class BotUnavailableError(NotFoundException):
    """Bot is missing or not published. Both cases look the same to callers."""

    def __init__(self):
        super().__init__("Bot")
        self.message = "Bot not found or not published"


@dataclass
class ChatReply:
    """Result of answering one inbound message."""

    reply_text: str
    conversation_id: str
    bot_name: str


class ConversationResponder:
    """Answers public widget messages and logs the conversation."""

    @staticmethod
    async def get_bot_with_rules(
        db: AsyncSession,
        bot_id: str,
    ) -> Optional[tuple[Bot, list[Intent], list[FAQ]]]:
        """
        Load a bot together with all of its intents and FAQs.

        Disabled rules are loaded too; the matcher skips them. Rules are
        returned oldest first (ties broken by id), which is the scan order.

        Args:
            db: Database session
            bot_id: Bot ID

        Returns:
            (bot, intents, faqs) or None if the bot does not exist
        """
        bot = await db.get(Bot, bot_id)
        if bot is None:
            return None

        intents = await db.execute(
            select(Intent)
            .where(Intent.bot_id == bot_id)
            .order_by(Intent.created_at.asc(), Intent.id.asc())
        )
        faqs = await db.execute(
            select(FAQ)
            .where(FAQ.bot_id == bot_id)
            .order_by(FAQ.created_at.asc(), FAQ.id.asc())
        )
        return bot, list(intents.scalars().all()), list(faqs.scalars().all())

    @staticmethod
    async def get_or_create_conversation(
        db: AsyncSession,
        bot_id: str,
        session_id: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> Conversation:
        """
        Find the conversation for (bot, session) or create it.

        Not atomic: concurrent first messages for a new session rely on the
        (bot_id, session_id) unique constraint.

        Args:
            db: Database session
            bot_id: Bot ID
            session_id: Client-supplied session key
            metadata: Raw client metadata, stored unmodified on creation

        Returns:
            Conversation
        """
        result = await db.execute(
            select(Conversation).where(
                Conversation.bot_id == bot_id,
                Conversation.session_id == session_id,
            )
        )
        conversation = result.scalar_one_or_none()
        if conversation:
            return conversation

        source = (metadata or {}).get("source") or DEFAULT_SOURCE
        conversation = Conversation(
            bot_id=bot_id,
            session_id=session_id,
            source=source,
            metadata_=metadata,
        )
        db.add(conversation)
        await db.flush()

        logger.info(f"Started conversation {conversation.id} for bot {bot_id} ({source})")
        return conversation

    @staticmethod
    async def add_message(
        db: AsyncSession,
        conversation_id: str,
        role: MessageRole,
        content: str,
    ) -> Message:
        """Append a message to a conversation."""
        message = Message(
            conversation_id=conversation_id,
            role=role,
            content=content,
        )
        db.add(message)
        await db.flush()
        return message

    @staticmethod
    async def respond(
        db: AsyncSession,
        bot_id: str,
        session_id: str,
        message: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> ChatReply:
        """
        Answer an inbound widget message.

        Records the user message, picks a reply from the bot's intents and
        FAQs (falling back to the welcome message), records the reply and
        bumps the daily message counter.

        Args:
            db: Database session
            bot_id: Bot ID
            session_id: Client-supplied session key
            message: Raw message text
            metadata: Optional client metadata (``source`` tags the conversation)

        Returns:
            ChatReply with reply text, conversation ID and bot name

        Raises:
            BotUnavailableError: If the bot does not exist or is unpublished
        """
        loaded = await ConversationResponder.get_bot_with_rules(db, bot_id)
        if loaded is None or not loaded[0].published:
            raise BotUnavailableError()

        bot, intents, faqs = loaded

        conversation = await ConversationResponder.get_or_create_conversation(
            db, bot_id, session_id, metadata
        )

        await ConversationResponder.add_message(db, conversation.id, MessageRole.USER, message)

        reply = select_reply(message, bot.welcome_message, intents, faqs)

        await ConversationResponder.add_message(db, conversation.id, MessageRole.ASSISTANT, reply)
        await db.commit()

        # Captured before the analytics step; a rollback there expires loaded rows
        chat_reply = ChatReply(
            reply_text=reply,
            conversation_id=conversation.id,
            bot_name=bot.name,
        )

        if settings.chat_analytics_enabled:
            await ConversationResponder._record_message_metric(db, bot_id)

        return chat_reply

    @staticmethod
    async def _record_message_metric(db: AsyncSession, bot_id: str) -> None:
        # Runs after the messages are committed; a failure here only loses the count
        try:
            await AnalyticsService.increment_messages(db, bot_id)
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.warning(f"Failed to update message analytics for bot {bot_id}: {e}")

    @staticmethod
    async def get_public_config(
        db: AsyncSession,
        bot_id: str,
    ) -> Bot:
        """
        Get the published bot for the embeddable widget.

        Raises:
            BotUnavailableError: If the bot does not exist or is unpublished
        """
        bot = await db.get(Bot, bot_id)
        if bot is None or not bot.published:
            raise BotUnavailableError()
        return bot
