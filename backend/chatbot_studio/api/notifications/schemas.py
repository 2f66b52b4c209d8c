"""
Notification API schemas.
"""
from datetime import datetime

from chatbot_studio.api.common import CamelModel


class NotificationResponse(CamelModel):
    """Response schema for a notification."""

    id: str
    type: str
    title: str
    message: str
    read: bool
    created_at: datetime


class UnreadCountResponse(CamelModel):
    count: int
