"""
Conversation and Message SQLAlchemy models.
"""
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional
from uuid import uuid4

from sqlalchemy import String, Text, DateTime, ForeignKey, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatbot_studio.core.database import Base, JSONType

if TYPE_CHECKING:
    from chatbot_studio.models.bot import Bot
    from chatbot_studio.models.lead import Lead


DEFAULT_SOURCE = "widget"
SOURCE_MAX_LENGTH = 50


class MessageRole(str, Enum):
    """Message sender role."""
    USER = "USER"
    ASSISTANT = "ASSISTANT"


class Conversation(Base):
    """Session-scoped message thread between an end user and a bot."""

    __tablename__ = "conversations"
    __table_args__ = (
        # One conversation per client session per bot
        UniqueConstraint("bot_id", "session_id", name="uq_conversation_bot_session"),
    )

    # Primary key
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    # Foreign key
    bot_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("bots.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Fields
    session_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    source: Mapped[str] = mapped_column(
        String(SOURCE_MAX_LENGTH),
        nullable=False,
        default=DEFAULT_SOURCE,
    )
    # "metadata" is reserved on declarative classes
    metadata_: Mapped[Optional[dict]] = mapped_column(
        "metadata",
        JSONType,
        nullable=True,
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    bot: Mapped["Bot"] = relationship(
        "Bot",
        back_populates="conversations",
    )
    messages: Mapped[list["Message"]] = relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="Message.created_at",
    )
    leads: Mapped[list["Lead"]] = relationship(
        "Lead",
        back_populates="conversation",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Conversation {self.id[:8]}... session={self.session_id}>"


class Message(Base):
    """Immutable chat message in a conversation."""

    __tablename__ = "messages"

    # Primary key
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    # Foreign key
    conversation_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Fields
    role: Mapped[MessageRole] = mapped_column(
        SQLEnum(MessageRole, name="message_role"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
    )

    # Relationships
    conversation: Mapped["Conversation"] = relationship(
        "Conversation",
        back_populates="messages",
    )

    def __repr__(self) -> str:
        content_preview = self.content[:30] + "..." if len(self.content) > 30 else self.content
        return f"<Message {self.role.value}: {content_preview}>"

    @property
    def is_user(self) -> bool:
        """Check if message is from user."""
        return self.role == MessageRole.USER

    @property
    def is_assistant(self) -> bool:
        """Check if message is from assistant."""
        return self.role == MessageRole.ASSISTANT
