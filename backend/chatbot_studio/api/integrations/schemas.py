"""
Integration API schemas.
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from chatbot_studio.api.common import CamelModel


class CreateIntegrationRequest(CamelModel):
    """Request schema for adding a catalog integration (admin only)."""

    name: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, max_length=100, pattern=r"^[a-z0-9-]+$")
    description: Optional[str] = Field(default=None, max_length=1000)
    category: Optional[str] = Field(default=None, max_length=50)
    active: bool = True


class IntegrationResponse(CamelModel):
    """Response schema for a catalog integration."""

    id: str
    name: str
    slug: str
    description: Optional[str] = None
    category: Optional[str] = None
    active: bool
    created_at: datetime


class ConfigureIntegrationRequest(CamelModel):
    """Request schema for configuring an integration."""

    integration_id: str = Field(..., min_length=1)
    config: dict[str, Any] = Field(default_factory=dict)


class IntegrationConfigResponse(CamelModel):
    """Response schema for a user's integration configuration."""

    id: str
    user_id: str
    integration_id: str
    config: dict[str, Any]
    created_at: datetime
    updated_at: datetime


class ConfiguredIntegrationResponse(IntegrationConfigResponse):
    integration: IntegrationResponse
