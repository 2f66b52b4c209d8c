"""
Conversation API schemas.
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from chatbot_studio.api.common import CamelModel
from chatbot_studio.models.conversation import Conversation, MessageRole


class ChatMessage(CamelModel):
    """Single chat message."""

    id: str
    conversation_id: str
    role: MessageRole
    content: str
    created_at: datetime


class ConversationResponse(CamelModel):
    """Conversation summary."""

    id: str
    bot_id: str
    session_id: str
    source: str
    metadata: Optional[dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, conversation: Conversation, **extra) -> "ConversationResponse":
        # The ORM attribute is metadata_, so fields are copied explicitly
        return cls(
            id=conversation.id,
            bot_id=conversation.bot_id,
            session_id=conversation.session_id,
            source=conversation.source,
            metadata=conversation.metadata_,
            created_at=conversation.created_at,
            updated_at=conversation.updated_at,
            **extra,
        )


class ConversationListItem(ConversationResponse):
    """Conversation with its message count."""

    count: dict[str, int] = Field(default_factory=dict, alias="_count")


class ConversationDetailResponse(ConversationResponse):
    """Conversation with its messages, oldest first."""

    messages: list[ChatMessage] = Field(default_factory=list)
