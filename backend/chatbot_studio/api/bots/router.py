"""
Bot management API router.
"""
from fastapi import APIRouter, status

from chatbot_studio.api.common import MessageResponse
from chatbot_studio.api.deps import CurrentUser, DbSession
from chatbot_studio.api.bots.schemas import (
    BotResponse,
    BotWithCountsResponse,
    CreateBotRequest,
    CreateFAQRequest,
    CreateIntentRequest,
    FAQResponse,
    IntentResponse,
    UpdateBotRequest,
    UpdateFAQRequest,
    UpdateIntentRequest,
)
from chatbot_studio.core.exceptions import NotFoundException
from chatbot_studio.models.bot import Bot
from chatbot_studio.models.user import User
from chatbot_studio.services.bot_service import BotManager, KnowledgeService

router = APIRouter()


async def get_owned_bot(db, bot_id: str, user: User) -> Bot:
    """Load a bot owned by the user or raise 404."""
    bot = await BotManager.get_by_id(db, bot_id, user.id)
    if not bot:
        raise NotFoundException("Bot")
    return bot


@router.get("", response_model=list[BotWithCountsResponse])
async def list_bots(
    current_user: CurrentUser,
    db: DbSession,
) -> list[BotWithCountsResponse]:
    """List the current user's bots with conversation and document counts."""
    bots = await BotManager.list_by_user(db, current_user.id)

    items = []
    for bot in bots:
        counts = await BotManager.get_counts(db, bot.id)
        items.append(
            BotWithCountsResponse.model_validate(bot).model_copy(update={"count": counts})
        )
    return items


@router.post("", response_model=BotResponse, status_code=status.HTTP_201_CREATED)
async def create_bot(
    request: CreateBotRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> BotResponse:
    """
    Create a new bot.

    Args:
        request: Bot creation request
        current_user: Authenticated user
        db: Database session

    Returns:
        Created bot
    """
    bot = await BotManager.create(
        db=db,
        user_id=current_user.id,
        name=request.name,
        description=request.description,
        system_prompt=request.system_prompt,
        welcome_message=request.welcome_message,
        color=request.color,
        avatar=request.avatar,
    )
    return BotResponse.model_validate(bot)


@router.get("/{bot_id}", response_model=BotWithCountsResponse)
async def get_bot(
    bot_id: str,
    current_user: CurrentUser,
    db: DbSession,
) -> BotWithCountsResponse:
    """Get a bot with all related row counts."""
    bot = await get_owned_bot(db, bot_id, current_user)
    counts = await BotManager.get_counts(
        db, bot.id, ("conversations", "documents", "intents", "faqs")
    )
    return BotWithCountsResponse.model_validate(bot).model_copy(update={"count": counts})


@router.put("/{bot_id}", response_model=BotResponse)
async def update_bot(
    bot_id: str,
    request: UpdateBotRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> BotResponse:
    """Update a bot. Only the fields present in the body change."""
    bot = await BotManager.update(
        db=db,
        bot_id=bot_id,
        user_id=current_user.id,
        fields=request.changes(),
    )
    if not bot:
        raise NotFoundException("Bot")
    return BotResponse.model_validate(bot)


@router.delete("/{bot_id}", response_model=MessageResponse)
async def delete_bot(
    bot_id: str,
    current_user: CurrentUser,
    db: DbSession,
) -> MessageResponse:
    """Delete a bot with its intents, FAQs, documents and conversations."""
    deleted = await BotManager.delete(db, bot_id, current_user.id)
    if not deleted:
        raise NotFoundException("Bot")
    return MessageResponse(message="Bot deleted successfully")


@router.post("/{bot_id}/publish", response_model=BotResponse)
async def publish_bot(
    bot_id: str,
    current_user: CurrentUser,
    db: DbSession,
) -> BotResponse:
    """
    Publish a bot.

    Notifies the owner in-app and by email.
    """
    bot = await BotManager.publish(db, bot_id, current_user)
    if not bot:
        raise NotFoundException("Bot")
    return BotResponse.model_validate(bot)


# =============================================================================
# Intents
# =============================================================================

@router.get("/{bot_id}/intents", response_model=list[IntentResponse])
async def list_intents(
    bot_id: str,
    current_user: CurrentUser,
    db: DbSession,
) -> list[IntentResponse]:
    """List a bot's intents, newest first."""
    await get_owned_bot(db, bot_id, current_user)
    intents = await KnowledgeService.list_intents(db, bot_id)
    return [IntentResponse.model_validate(intent) for intent in intents]


@router.post(
    "/{bot_id}/intents",
    response_model=IntentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_intent(
    bot_id: str,
    request: CreateIntentRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> IntentResponse:
    """Create an intent on a bot."""
    await get_owned_bot(db, bot_id, current_user)
    intent = await KnowledgeService.create_intent(
        db=db,
        bot_id=bot_id,
        name=request.name,
        patterns=request.patterns,
        response=request.response,
        enabled=request.enabled,
    )
    return IntentResponse.model_validate(intent)


@router.put("/{bot_id}/intents/{intent_id}", response_model=IntentResponse)
async def update_intent(
    bot_id: str,
    intent_id: str,
    request: UpdateIntentRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> IntentResponse:
    await get_owned_bot(db, bot_id, current_user)
    intent = await KnowledgeService.update_intent(
        db, bot_id, intent_id, request.changes()
    )
    if not intent:
        raise NotFoundException("Intent")
    return IntentResponse.model_validate(intent)


@router.delete("/{bot_id}/intents/{intent_id}", response_model=MessageResponse)
async def delete_intent(
    bot_id: str,
    intent_id: str,
    current_user: CurrentUser,
    db: DbSession,
) -> MessageResponse:
    await get_owned_bot(db, bot_id, current_user)
    if not await KnowledgeService.delete_intent(db, bot_id, intent_id):
        raise NotFoundException("Intent")
    return MessageResponse(message="Intent deleted")


# =============================================================================
# FAQs
# =============================================================================

@router.get("/{bot_id}/faqs", response_model=list[FAQResponse])
async def list_faqs(
    bot_id: str,
    current_user: CurrentUser,
    db: DbSession,
) -> list[FAQResponse]:
    """List a bot's FAQs, newest first."""
    await get_owned_bot(db, bot_id, current_user)
    faqs = await KnowledgeService.list_faqs(db, bot_id)
    return [FAQResponse.model_validate(faq) for faq in faqs]


@router.post(
    "/{bot_id}/faqs",
    response_model=FAQResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_faq(
    bot_id: str,
    request: CreateFAQRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> FAQResponse:
    """Create an FAQ on a bot."""
    await get_owned_bot(db, bot_id, current_user)
    faq = await KnowledgeService.create_faq(
        db=db,
        bot_id=bot_id,
        question=request.question,
        answer=request.answer,
        category=request.category,
        enabled=request.enabled,
    )
    return FAQResponse.model_validate(faq)


@router.put("/{bot_id}/faqs/{faq_id}", response_model=FAQResponse)
async def update_faq(
    bot_id: str,
    faq_id: str,
    request: UpdateFAQRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> FAQResponse:
    await get_owned_bot(db, bot_id, current_user)
    faq = await KnowledgeService.update_faq(
        db, bot_id, faq_id, request.changes()
    )
    if not faq:
        raise NotFoundException("FAQ")
    return FAQResponse.model_validate(faq)


@router.delete("/{bot_id}/faqs/{faq_id}", response_model=MessageResponse)
async def delete_faq(
    bot_id: str,
    faq_id: str,
    current_user: CurrentUser,
    db: DbSession,
) -> MessageResponse:
    await get_owned_bot(db, bot_id, current_user)
    if not await KnowledgeService.delete_faq(db, bot_id, faq_id):
        raise NotFoundException("FAQ")
    return MessageResponse(message="FAQ deleted")
