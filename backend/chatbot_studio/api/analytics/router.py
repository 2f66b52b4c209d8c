"""
Analytics API router.
"""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Query

from chatbot_studio.api.deps import CurrentUser, DbSession
from chatbot_studio.api.analytics.schemas import MetricResponse, OverviewResponse
from chatbot_studio.services.analytics_service import AnalyticsService

router = APIRouter()


@router.get("/overview", response_model=OverviewResponse)
async def get_overview(
    current_user: CurrentUser,
    db: DbSession,
    bot_id: Optional[str] = Query(default=None, alias="botId"),
    start_date: Optional[datetime] = Query(default=None, alias="startDate"),
    end_date: Optional[datetime] = Query(default=None, alias="endDate"),
) -> OverviewResponse:
    """
    Conversation, message and lead totals across the user's bots.

    The date range applies to conversations and only when both ends are given.
    """
    overview = await AnalyticsService.get_overview(
        db, current_user.id, bot_id, start_date, end_date
    )
    return OverviewResponse(**overview)


@router.get("/metrics", response_model=list[MetricResponse])
async def get_metrics(
    current_user: CurrentUser,
    db: DbSession,
    bot_id: Optional[str] = Query(default=None, alias="botId"),
) -> list[MetricResponse]:
    """Latest 30 daily counters, newest day first."""
    metrics = await AnalyticsService.get_metrics(db, current_user.id, bot_id)
    return [MetricResponse.model_validate(m) for m in metrics]
