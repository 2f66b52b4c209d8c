"""
Plan and Subscription SQLAlchemy models.
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


class SubscriptionStatus(str, Enum):
    """Subscription lifecycle status."""
    ACTIVE = "ACTIVE"
    CANCELED = "CANCELED"


class Plan(Base):
    """Billing plan."""

    __tablename__ = "plans"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    slug: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    # Price in the smallest currency unit
    price: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )
    interval: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="month",
    )
    max_bots: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
    )
    max_messages: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1000,
    )
    features: Mapped[list] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
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

    subscriptions: Mapped[list["Subscription"]] = relationship(
        "Subscription",
        back_populates="plan",
    )

    def __repr__(self) -> str:
        return f"<Plan {self.slug} ({self.price}/{self.interval})>"


class Subscription(Base):
    """A user's subscription to a plan."""

    __tablename__ = "subscriptions"

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
    plan_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("plans.id", ondelete="RESTRICT"),
        nullable=False,
    )

    status: Mapped[SubscriptionStatus] = mapped_column(
        SQLEnum(SubscriptionStatus, name="subscription_status"),
        nullable=False,
        default=SubscriptionStatus.ACTIVE,
    )
    current_period_start: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
    )
    current_period_end: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
    )
    cancel_at_period_end: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
    )

    user: Mapped["User"] = relationship(
        "User",
        back_populates="subscriptions",
    )
    plan: Mapped["Plan"] = relationship(
        "Plan",
        back_populates="subscriptions",
    )
