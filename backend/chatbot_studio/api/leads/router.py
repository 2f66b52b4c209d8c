"""
Lead capture API router.
"""
from typing import Optional

from fastapi import APIRouter, Query, status

from chatbot_studio.api.common import MessageResponse
from chatbot_studio.api.deps import CurrentUser, DbSession
from chatbot_studio.api.leads.schemas import (
    CampaignResponse,
    CreateCampaignRequest,
    CreateLeadRequest,
    LeadListItem,
    LeadResponse,
    UpdateLeadRequest,
)
from chatbot_studio.core.exceptions import NotFoundException
from chatbot_studio.models.lead import LeadStatus
from chatbot_studio.services.lead_service import LeadService

router = APIRouter()


@router.get("", response_model=list[LeadListItem])
async def list_leads(
    current_user: CurrentUser,
    db: DbSession,
    campaign_id: Optional[str] = Query(default=None, alias="campaignId"),
    status_filter: Optional[LeadStatus] = Query(default=None, alias="status"),
) -> list[LeadListItem]:
    """List leads from the user's bots, newest first."""
    rows = await LeadService.list_by_user(db, current_user.id, campaign_id, status_filter)
    return [
        LeadListItem(**LeadResponse.model_validate(lead).model_dump(), bot_name=bot_name)
        for lead, bot_name in rows
    ]


@router.post("", response_model=LeadResponse, status_code=status.HTTP_201_CREATED)
async def create_lead(
    request: CreateLeadRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> LeadResponse:
    """
    Capture a lead from a conversation.

    Raises:
        NotFoundException: Conversation or campaign not found
        ConflictException: Campaign out of credits
    """
    lead = await LeadService.create(
        db=db,
        user_id=current_user.id,
        conversation_id=request.conversation_id,
        name=request.name,
        email=request.email,
        phone=request.phone,
        campaign_id=request.campaign_id,
        data=request.data,
    )
    return LeadResponse.model_validate(lead)


@router.get("/campaigns", response_model=list[CampaignResponse])
async def list_campaigns(
    current_user: CurrentUser,
    db: DbSession,
) -> list[CampaignResponse]:
    """List the user's lead campaigns with lead counts."""
    rows = await LeadService.list_campaigns(db, current_user.id)
    return [
        CampaignResponse.model_validate(campaign).model_copy(update={"count": {"leads": count}})
        for campaign, count in rows
    ]


@router.post("/campaigns", response_model=CampaignResponse, status_code=status.HTTP_201_CREATED)
async def create_campaign(
    request: CreateCampaignRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> CampaignResponse:
    campaign = await LeadService.create_campaign(
        db=db,
        user_id=current_user.id,
        name=request.name,
        description=request.description,
        credits_limit=request.credits_limit,
    )
    return CampaignResponse.model_validate(campaign).model_copy(update={"count": {"leads": 0}})


@router.put("/{lead_id}", response_model=LeadResponse)
async def update_lead(
    lead_id: str,
    request: UpdateLeadRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> LeadResponse:
    """Update a lead's pipeline status or score."""
    lead = await LeadService.update(
        db, lead_id, current_user.id, status=request.status, score=request.score
    )
    if not lead:
        raise NotFoundException("Lead")
    return LeadResponse.model_validate(lead)


@router.delete("/{lead_id}", response_model=MessageResponse)
async def delete_lead(
    lead_id: str,
    current_user: CurrentUser,
    db: DbSession,
) -> MessageResponse:
    if not await LeadService.delete(db, lead_id, current_user.id):
        raise NotFoundException("Lead")
    return MessageResponse(message="Lead deleted")
