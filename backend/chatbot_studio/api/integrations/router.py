"""
Integration API router.
"""
from fastapi import APIRouter, status

from chatbot_studio.api.common import MessageResponse
from chatbot_studio.api.deps import AdminUser, CurrentUser, DbSession
from chatbot_studio.api.integrations.schemas import (
    ConfigureIntegrationRequest,
    ConfiguredIntegrationResponse,
    CreateIntegrationRequest,
    IntegrationConfigResponse,
    IntegrationResponse,
)
from chatbot_studio.core.exceptions import NotFoundException
from chatbot_studio.services.integration_service import IntegrationService

router = APIRouter()


@router.get("", response_model=list[IntegrationResponse])
async def list_integrations(
    current_user: CurrentUser,
    db: DbSession,
) -> list[IntegrationResponse]:
    """Active catalog integrations by name."""
    integrations = await IntegrationService.list_active(db)
    return [IntegrationResponse.model_validate(i) for i in integrations]


@router.post("", response_model=IntegrationResponse, status_code=status.HTTP_201_CREATED)
async def create_integration(
    request: CreateIntegrationRequest,
    admin: AdminUser,
    db: DbSession,
) -> IntegrationResponse:
    """Add an integration to the catalog."""
    integration = await IntegrationService.create(db=db, **request.model_dump())
    return IntegrationResponse.model_validate(integration)


@router.get("/configured", response_model=list[ConfiguredIntegrationResponse])
async def list_configured(
    current_user: CurrentUser,
    db: DbSession,
) -> list[ConfiguredIntegrationResponse]:
    """The user's integration configurations with their catalog entries."""
    configs = await IntegrationService.list_configured(db, current_user.id)
    return [ConfiguredIntegrationResponse.model_validate(c) for c in configs]


@router.post(
    "/configure",
    response_model=IntegrationConfigResponse,
    status_code=status.HTTP_201_CREATED,
)
async def configure_integration(
    request: ConfigureIntegrationRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> IntegrationConfigResponse:
    """Create or replace the configuration of an integration."""
    integration_config = await IntegrationService.configure(
        db, current_user.id, request.integration_id, request.config
    )
    return IntegrationConfigResponse.model_validate(integration_config)


@router.delete("/{config_id}", response_model=MessageResponse)
async def remove_integration(
    config_id: str,
    current_user: CurrentUser,
    db: DbSession,
) -> MessageResponse:
    """Remove one of the user's integration configurations."""
    if not await IntegrationService.remove(db, config_id, current_user.id):
        raise NotFoundException("Integration configuration")
    return MessageResponse(message="Integration removed")
