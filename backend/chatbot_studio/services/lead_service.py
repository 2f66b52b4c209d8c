"""
Lead capture and lead campaign service.
"""
import logging
from typing import Any, Optional

from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from chatbot_studio.core.exceptions import ConflictException, NotFoundException
from chatbot_studio.models.bot import Bot
from chatbot_studio.models.conversation import Conversation
from chatbot_studio.models.lead import Lead, LeadCampaign, LeadStatus

logger = logging.getLogger(__name__)

DEFAULT_CREDITS_LIMIT = 100


class LeadService:
    """Leads captured from conversations on a user's bots."""

    @staticmethod
    async def list_by_user(
        db: AsyncSession,
        user_id: str,
        campaign_id: Optional[str] = None,
        status: Optional[LeadStatus] = None,
    ) -> list[tuple[Lead, str]]:
        """
        List leads, newest first.

        Returns:
            List of (lead, bot name)
        """
        query = (
            select(Lead, Bot.name)
            .join(Conversation, Lead.conversation_id == Conversation.id)
            .join(Bot, Conversation.bot_id == Bot.id)
            .where(Bot.user_id == user_id)
        )
        if campaign_id:
            query = query.where(Lead.campaign_id == campaign_id)
        if status:
            query = query.where(Lead.status == status)

        result = await db.execute(query.order_by(Lead.created_at.desc()))
        return [(lead, bot_name) for lead, bot_name in result.all()]

    @staticmethod
    async def get_by_id(
        db: AsyncSession,
        lead_id: str,
        user_id: str,
    ) -> Optional[Lead]:
        result = await db.execute(
            select(Lead)
            .join(Conversation, Lead.conversation_id == Conversation.id)
            .join(Bot, Conversation.bot_id == Bot.id)
            .where(Lead.id == lead_id, Bot.user_id == user_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def _consume_credit(db: AsyncSession, campaign_id: str, user_id: str) -> None:
        # Single conditional UPDATE so concurrent captures cannot overspend
        result = await db.execute(
            update(LeadCampaign)
            .where(
                LeadCampaign.id == campaign_id,
                LeadCampaign.user_id == user_id,
                LeadCampaign.active.is_(True),
                LeadCampaign.credits_used < LeadCampaign.credits_limit,
            )
            .values(credits_used=LeadCampaign.credits_used + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount:
            return

        campaign = await LeadService.get_campaign(db, campaign_id, user_id)
        if campaign is None:
            raise NotFoundException("Campaign")
        if not campaign.active:
            raise ConflictException("Campaign is not active")
        raise ConflictException("Campaign credits exhausted")

    @staticmethod
    async def create(
        db: AsyncSession,
        user_id: str,
        conversation_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        campaign_id: Optional[str] = None,
        data: Optional[dict[str, Any]] = None,
    ) -> Lead:
        """
        Capture a lead from a conversation.

        A lead attached to a campaign consumes one of its credits.

        Raises:
            NotFoundException: Conversation or campaign not owned by the user
            ConflictException: Campaign inactive or out of credits
        """
        conversation = await db.scalar(
            select(Conversation)
            .join(Bot, Conversation.bot_id == Bot.id)
            .where(Conversation.id == conversation_id, Bot.user_id == user_id)
        )
        if conversation is None:
            raise NotFoundException("Conversation")

        if campaign_id:
            await LeadService._consume_credit(db, campaign_id, user_id)

        lead = Lead(
            conversation_id=conversation_id,
            campaign_id=campaign_id,
            name=name,
            email=email,
            phone=phone,
            data=data,
        )
        db.add(lead)
        await db.commit()
        await db.refresh(lead)

        logger.info(f"Captured lead {lead.id} from conversation {conversation_id}")
        return lead

    @staticmethod
    async def update(
        db: AsyncSession,
        lead_id: str,
        user_id: str,
        status: Optional[LeadStatus] = None,
        score: Optional[int] = None,
    ) -> Optional[Lead]:
        lead = await LeadService.get_by_id(db, lead_id, user_id)
        if not lead:
            return None

        if status is not None:
            lead.status = status
        if score is not None:
            lead.score = score

        await db.commit()
        await db.refresh(lead)
        return lead

    @staticmethod
    async def delete(db: AsyncSession, lead_id: str, user_id: str) -> bool:
        lead = await LeadService.get_by_id(db, lead_id, user_id)
        if not lead:
            return False

        await db.delete(lead)
        await db.commit()
        return True

    # =========================================================================
    # Campaigns
    # =========================================================================

    @staticmethod
    async def get_campaign(
        db: AsyncSession,
        campaign_id: str,
        user_id: str,
    ) -> Optional[LeadCampaign]:
        result = await db.execute(
            select(LeadCampaign)
            .where(LeadCampaign.id == campaign_id, LeadCampaign.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_campaigns(
        db: AsyncSession,
        user_id: str,
    ) -> list[tuple[LeadCampaign, int]]:
        """List the user's campaigns, newest first, with lead counts."""
        lead_count = (
            select(func.count(Lead.id))
            .where(Lead.campaign_id == LeadCampaign.id)
            .correlate(LeadCampaign)
            .scalar_subquery()
        )
        result = await db.execute(
            select(LeadCampaign, lead_count)
            .where(LeadCampaign.user_id == user_id)
            .order_by(LeadCampaign.created_at.desc())
        )
        return [(campaign, count or 0) for campaign, count in result.all()]

    @staticmethod
    async def create_campaign(
        db: AsyncSession,
        user_id: str,
        name: str,
        description: Optional[str] = None,
        credits_limit: Optional[int] = None,
    ) -> LeadCampaign:
        campaign = LeadCampaign(
            user_id=user_id,
            name=name,
            description=description,
            credits_limit=credits_limit or DEFAULT_CREDITS_LIMIT,
        )
        db.add(campaign)
        await db.commit()
        await db.refresh(campaign)
        return campaign
