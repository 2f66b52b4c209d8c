"""
Analytics API schemas.
"""
from datetime import date as date_type

from chatbot_studio.api.common import CamelModel


class OverviewResponse(CamelModel):
    """Dashboard totals."""

    conversations: int
    messages: int
    leads: int


class MetricResponse(CamelModel):
    """One per-day counter."""

    id: str
    bot_id: str
    date: date_type
    metric: str
    value: int
