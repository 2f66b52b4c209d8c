"""
Document API schemas.
"""
from datetime import datetime
from typing import Optional

from chatbot_studio.api.common import CamelModel
from chatbot_studio.models.document import DocumentStatus


class DocumentResponse(CamelModel):
    """Response schema for a document."""

    id: str
    bot_id: str
    name: str
    type: str
    size: int
    url: str
    content: Optional[str] = None
    status: DocumentStatus
    error_message: Optional[str] = None
    created_at: datetime
