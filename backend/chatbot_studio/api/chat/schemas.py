"""
Chat API schemas.
"""
from typing import Any, Optional

from pydantic import Field, field_validator

from chatbot_studio.api.common import CamelModel
from chatbot_studio.models.conversation import SOURCE_MAX_LENGTH


class ChatRequest(CamelModel):
    """Inbound widget message."""

    bot_id: str = Field(..., min_length=1, description="Bot ID")
    message: str = Field(..., min_length=1, description="Message text")
    session_id: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Client-generated session key",
    )
    metadata: Optional[dict[str, Any]] = Field(
        default=None,
        description="Client metadata; 'source' tags the conversation",
    )

    @field_validator("metadata")
    @classmethod
    def validate_source(cls, v: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
        source = (v or {}).get("source")
        if source is None:
            return v
        if not isinstance(source, str):
            raise ValueError("metadata.source must be a string")
        if len(source) > SOURCE_MAX_LENGTH:
            raise ValueError(f"metadata.source must be at most {SOURCE_MAX_LENGTH} characters")
        return v


class ChatResponse(CamelModel):
    """Reply to a widget message."""

    message: str = Field(..., description="Reply text")
    conversation_id: str = Field(..., description="Conversation ID")
    bot_name: str = Field(..., description="Bot display name")


class BotPublicConfig(CamelModel):
    """Public projection of a published bot for the embeddable widget."""

    id: str
    name: str
    avatar: Optional[str] = None
    welcome_message: str
    color: str
    published: bool
