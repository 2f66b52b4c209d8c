"""
Intent and FAQ SQLAlchemy models.

Both are canned-response rules owned by a bot and evaluated read-only by
the chat matcher.
"""
from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import uuid4

from sqlalchemy import String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatbot_studio.core.database import Base, JSONType

if TYPE_CHECKING:
    from chatbot_studio.models.bot import Bot


class Intent(Base):
    """Pattern-triggered response rule."""

    __tablename__ = "intents"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    bot_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("bots.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    patterns: Mapped[list] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
    )
    response: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    enabled: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )

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

    bot: Mapped["Bot"] = relationship(
        "Bot",
        back_populates="intents",
    )

    def __repr__(self) -> str:
        return f"<Intent {self.name} ({len(self.patterns or [])} patterns)>"


class FAQ(Base):
    """Question-triggered response rule."""

    __tablename__ = "faqs"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    bot_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("bots.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    question: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    answer: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    category: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )
    enabled: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )

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

    bot: Mapped["Bot"] = relationship(
        "Bot",
        back_populates="faqs",
    )

    def __repr__(self) -> str:
        preview = self.question[:30] + "..." if len(self.question) > 30 else self.question
        return f"<FAQ {preview}>"
