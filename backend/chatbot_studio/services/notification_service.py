"""
In-app notification service.
"""
from typing import Optional

from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from chatbot_studio.models.notification import Notification

NOTIFICATION_LIST_LIMIT = 50


class NotificationService:
    """Read and manage a user's notifications."""

    @staticmethod
    async def list_recent(db: AsyncSession, user_id: str) -> list[Notification]:
        result = await db.execute(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
            .limit(NOTIFICATION_LIST_LIMIT)
        )
        return list(result.scalars().all())

    @staticmethod
    async def count_unread(db: AsyncSession, user_id: str) -> int:
        return await db.scalar(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.read.is_(False),
            )
        ) or 0

    @staticmethod
    async def get_by_id(
        db: AsyncSession,
        notification_id: str,
        user_id: str,
    ) -> Optional[Notification]:
        result = await db.execute(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def mark_read(
        db: AsyncSession,
        notification_id: str,
        user_id: str,
    ) -> Optional[Notification]:
        notification = await NotificationService.get_by_id(db, notification_id, user_id)
        if not notification:
            return None

        notification.read = True
        await db.commit()
        await db.refresh(notification)
        return notification

    @staticmethod
    async def mark_all_read(db: AsyncSession, user_id: str) -> None:
        await db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.read.is_(False))
            .values(read=True)
        )
        await db.commit()

    @staticmethod
    async def delete(db: AsyncSession, notification_id: str, user_id: str) -> bool:
        notification = await NotificationService.get_by_id(db, notification_id, user_id)
        if not notification:
            return False

        await db.delete(notification)
        await db.commit()
        return True
