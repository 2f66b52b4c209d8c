"""
Analytics counter SQLAlchemy model.
"""
from datetime import date as date_type
from typing import TYPE_CHECKING
from uuid import uuid4

from sqlalchemy import String, Date, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatbot_studio.core.database import Base

if TYPE_CHECKING:
    from chatbot_studio.models.bot import Bot


class AnalyticsMetric:
    """Known counter names."""
    MESSAGES = "messages"


class Analytics(Base):
    """Per-day counter for one bot metric."""

    __tablename__ = "analytics"
    __table_args__ = (
        UniqueConstraint("bot_id", "date", "metric", name="uq_analytics_bot_date_metric"),
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
    date: Mapped[date_type] = mapped_column(
        Date,
        nullable=False,
    )
    metric: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    value: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    # Relationships
    bot: Mapped["Bot"] = relationship(
        "Bot",
        back_populates="analytics",
    )

    def __repr__(self) -> str:
        return f"<Analytics {self.date} {self.metric}={self.value}>"
