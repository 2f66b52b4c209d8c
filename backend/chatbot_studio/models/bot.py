"""
Bot SQLAlchemy model.
"""
from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import uuid4

from sqlalchemy import String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatbot_studio.core.database import Base

if TYPE_CHECKING:
    from chatbot_studio.models.user import User
    from chatbot_studio.models.knowledge import Intent, FAQ
    from chatbot_studio.models.document import Document
    from chatbot_studio.models.conversation import Conversation
    from chatbot_studio.models.analytics import Analytics


DEFAULT_SYSTEM_PROMPT = "You are a helpful AI assistant."
DEFAULT_WELCOME_MESSAGE = "Hello! How can I help you?"
DEFAULT_COLOR = "#6366f1"


class Bot(Base):
    """Chatbot configured by its owner."""

    __tablename__ = "bots"

    # Primary key
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    # Foreign key
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Fields
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    system_prompt: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=DEFAULT_SYSTEM_PROMPT,
    )
    welcome_message: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=DEFAULT_WELCOME_MESSAGE,
    )
    avatar: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )
    color: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=DEFAULT_COLOR,
    )
    published: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
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
    owner: Mapped["User"] = relationship(
        "User",
        back_populates="bots",
    )
    intents: Mapped[list["Intent"]] = relationship(
        "Intent",
        back_populates="bot",
        cascade="all, delete-orphan",
    )
    faqs: Mapped[list["FAQ"]] = relationship(
        "FAQ",
        back_populates="bot",
        cascade="all, delete-orphan",
    )
    documents: Mapped[list["Document"]] = relationship(
        "Document",
        back_populates="bot",
        cascade="all, delete-orphan",
    )
    conversations: Mapped[list["Conversation"]] = relationship(
        "Conversation",
        back_populates="bot",
        cascade="all, delete-orphan",
    )
    analytics: Mapped[list["Analytics"]] = relationship(
        "Analytics",
        back_populates="bot",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        state = "published" if self.published else "draft"
        return f"<Bot {self.name} ({state})>"
