"""
Lead and LeadCampaign SQLAlchemy models.
"""
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional
from uuid import uuid4

from sqlalchemy import String, Text, Integer, Boolean, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatbot_studio.core.database import Base, JSONType

if TYPE_CHECKING:
    from chatbot_studio.models.user import User
    from chatbot_studio.models.conversation import Conversation


class LeadStatus(str, Enum):
    """Lead pipeline status."""
    NEW = "NEW"
    CONTACTED = "CONTACTED"
    QUALIFIED = "QUALIFIED"
    CONVERTED = "CONVERTED"
    LOST = "LOST"


class LeadCampaign(Base):
    """Campaign grouping captured leads, with a credit budget."""

    __tablename__ = "lead_campaigns"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    credits_limit: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=100,
    )
    credits_used: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )
    active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
    )

    user: Mapped["User"] = relationship(
        "User",
        back_populates="lead_campaigns",
    )
    leads: Mapped[list["Lead"]] = relationship(
        "Lead",
        back_populates="campaign",
    )

    @property
    def credits_remaining(self) -> int:
        return max(0, self.credits_limit - self.credits_used)


class Lead(Base):
    """Contact captured from a conversation."""

    __tablename__ = "leads"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    conversation_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    campaign_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("lead_campaigns.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    name: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )
    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    phone: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )
    status: Mapped[LeadStatus] = mapped_column(
        SQLEnum(LeadStatus, name="lead_status"),
        nullable=False,
        default=LeadStatus.NEW,
        index=True,
    )
    score: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )
    data: Mapped[Optional[dict]] = mapped_column(
        JSONType,
        nullable=True,
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

    conversation: Mapped["Conversation"] = relationship(
        "Conversation",
        back_populates="leads",
    )
    campaign: Mapped[Optional["LeadCampaign"]] = relationship(
        "LeadCampaign",
        back_populates="leads",
    )

    def __repr__(self) -> str:
        return f"<Lead {self.email or self.id[:8]} ({self.status.value})>"
