"""
Public chat API router.
"""
from fastapi import APIRouter, Depends

from chatbot_studio.api.deps import DbSession
from chatbot_studio.api.chat.schemas import (
    BotPublicConfig,
    ChatRequest,
    ChatResponse,
)
from chatbot_studio.core.rate_limit import chat_rate_limit
from chatbot_studio.services.chat_service import ConversationResponder

router = APIRouter()


@router.post("", response_model=ChatResponse, dependencies=[Depends(chat_rate_limit)])
async def send_message(
    request: ChatRequest,
    db: DbSession,
) -> ChatResponse:
    """
    Answer a widget message.

    Args:
        request: Bot ID, session ID, message text and optional metadata
        db: Database session

    Returns:
        Reply text, conversation ID and bot name

    Raises:
        NotFoundException: If the bot does not exist or is not published
    """
    reply = await ConversationResponder.respond(
        db=db,
        bot_id=request.bot_id,
        session_id=request.session_id,
        message=request.message,
        metadata=request.metadata,
    )

    return ChatResponse(
        message=reply.reply_text,
        conversation_id=reply.conversation_id,
        bot_name=reply.bot_name,
    )


@router.get("/{bot_id}/config", response_model=BotPublicConfig)
async def get_bot_config(
    bot_id: str,
    db: DbSession,
) -> BotPublicConfig:
    """Get the public widget configuration of a published bot."""
    bot = await ConversationResponder.get_public_config(db, bot_id)
    return BotPublicConfig.model_validate(bot)
