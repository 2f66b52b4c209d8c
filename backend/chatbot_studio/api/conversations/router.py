"""
Conversation API router.
"""
from typing import Optional

from fastapi import APIRouter, Query

from chatbot_studio.api.common import MessageResponse
from chatbot_studio.api.deps import CurrentUser, DbSession
from chatbot_studio.api.conversations.schemas import (
    ConversationDetailResponse,
    ConversationListItem,
    ChatMessage,
)
from chatbot_studio.core.exceptions import NotFoundException
from chatbot_studio.services.conversation_service import ConversationService

router = APIRouter()


@router.get("", response_model=list[ConversationListItem])
async def list_conversations(
    current_user: CurrentUser,
    db: DbSession,
    bot_id: Optional[str] = Query(default=None, alias="botId"),
) -> list[ConversationListItem]:
    """List conversations on the user's bots, newest first."""
    rows = await ConversationService.list_by_user(db, current_user.id, bot_id)
    return [
        ConversationListItem.from_model(conversation, count={"messages": count})
        for conversation, count in rows
    ]


@router.get("/{conversation_id}", response_model=ConversationDetailResponse)
async def get_conversation(
    conversation_id: str,
    current_user: CurrentUser,
    db: DbSession,
) -> ConversationDetailResponse:
    """Get a conversation with its full message history."""
    conversation = await ConversationService.get_by_id(
        db, conversation_id, current_user.id, with_messages=True
    )
    if not conversation:
        raise NotFoundException("Conversation")

    return ConversationDetailResponse.from_model(
        conversation,
        messages=[ChatMessage.model_validate(m) for m in conversation.messages],
    )


@router.delete("/{conversation_id}", response_model=MessageResponse)
async def delete_conversation(
    conversation_id: str,
    current_user: CurrentUser,
    db: DbSession,
) -> MessageResponse:
    if not await ConversationService.delete(db, conversation_id, current_user.id):
        raise NotFoundException("Conversation")
    return MessageResponse(message="Conversation deleted")
