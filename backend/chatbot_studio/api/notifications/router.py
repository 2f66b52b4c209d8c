"""
Notification API router.
"""
from fastapi import APIRouter

from chatbot_studio.api.common import MessageResponse
from chatbot_studio.api.deps import CurrentUser, DbSession
from chatbot_studio.api.notifications.schemas import (
    NotificationResponse,
    UnreadCountResponse,
)
from chatbot_studio.core.exceptions import NotFoundException
from chatbot_studio.services.notification_service import NotificationService

router = APIRouter()


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    current_user: CurrentUser,
    db: DbSession,
) -> list[NotificationResponse]:
    """Latest 50 notifications, newest first."""
    notifications = await NotificationService.list_recent(db, current_user.id)
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.get("/unread", response_model=UnreadCountResponse)
async def unread_count(
    current_user: CurrentUser,
    db: DbSession,
) -> UnreadCountResponse:
    count = await NotificationService.count_unread(db, current_user.id)
    return UnreadCountResponse(count=count)


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: str,
    current_user: CurrentUser,
    db: DbSession,
) -> NotificationResponse:
    notification = await NotificationService.mark_read(db, notification_id, current_user.id)
    if not notification:
        raise NotFoundException("Notification")
    return NotificationResponse.model_validate(notification)


@router.post("/mark-all-read", response_model=MessageResponse)
async def mark_all_read(
    current_user: CurrentUser,
    db: DbSession,
) -> MessageResponse:
    await NotificationService.mark_all_read(db, current_user.id)
    return MessageResponse(message="All notifications marked as read")


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(
    notification_id: str,
    current_user: CurrentUser,
    db: DbSession,
) -> MessageResponse:
    if not await NotificationService.delete(db, notification_id, current_user.id):
        raise NotFoundException("Notification")
    return MessageResponse(message="Notification deleted")
