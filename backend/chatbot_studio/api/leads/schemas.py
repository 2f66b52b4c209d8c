"""
Lead API schemas.
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import EmailStr, Field

from chatbot_studio.api.common import CamelModel
from chatbot_studio.models.lead import LeadStatus


class CreateLeadRequest(CamelModel):
    """Request schema for capturing a lead."""

    conversation_id: str = Field(..., min_length=1)
    name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    campaign_id: Optional[str] = None
    data: Optional[dict[str, Any]] = None


class UpdateLeadRequest(CamelModel):
    """Request schema for updating a lead."""

    status: Optional[LeadStatus] = None
    score: Optional[int] = Field(default=None, ge=0, le=100)


class LeadResponse(CamelModel):
    """Response schema for a lead."""

    id: str
    conversation_id: str
    campaign_id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    status: LeadStatus
    score: int
    data: Optional[dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime


class LeadListItem(LeadResponse):
    """Lead with the name of the bot it came from."""

    bot_name: str


class CreateCampaignRequest(CamelModel):
    """Request schema for creating a lead campaign."""

    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    credits_limit: Optional[int] = Field(default=None, ge=1)


class CampaignResponse(CamelModel):
    """Response schema for a lead campaign."""

    id: str
    name: str
    description: Optional[str] = None
    credits_limit: int
    credits_used: int
    active: bool
    created_at: datetime
    count: dict[str, int] = Field(default_factory=dict, alias="_count")
