"""
Notification Service.

Handles creation and state management of in-app notifications.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func
from typing import Optional, Dict, Any, List

from egzit.app.core.timeutils import utcnow
from egzit.app.models.notification import Notification, NotificationType


class NotificationService:

    @staticmethod
    async def create_notification(
        db: AsyncSession,
        user_id: int,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Notification:
        """Create a single notification."""
        notif = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            metadata_payload=metadata
        )
        db.add(notif)
        await db.flush()  # Caller commits
        return notif

    @staticmethod
    async def notify_move_owner(
        db: AsyncSession,
        move,
        title: str,
        message: str,
        type: NotificationType = NotificationType.MOVE_UPDATE
    ) -> Notification:
        return await NotificationService.create_notification(
            db,
            user_id=move.user_id,
            title=title,
            message=message,
            type=type,
            metadata={"move_id": move.id, "status": move.status.value}
        )

    @staticmethod
    async def list_for_user(
        db: AsyncSession,
        user_id: int,
        unread_only: bool = False,
        limit: int = 50
    ) -> List[Notification]:
        query = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            query = query.where(Notification.is_read == False)  # noqa: E712
        query = query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def unread_count(db: AsyncSession, user_id: int) -> int:
        result = await db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.is_read == False  # noqa: E712
            )
        )
        return result.scalar() or 0

    @staticmethod
    async def mark_read(db: AsyncSession, notification_id: int, user_id: int) -> bool:
        """Mark a notification as read."""
        stmt = update(Notification).where(
            Notification.id == notification_id,
            Notification.user_id == user_id
        ).values(
            is_read=True,
            read_at=utcnow()
        )
        result = await db.execute(stmt)
        return result.rowcount > 0

    @staticmethod
    async def mark_all_read(db: AsyncSession, user_id: int) -> int:
        """Mark all notifications for user as read."""
        stmt = update(Notification).where(
            Notification.user_id == user_id,
            Notification.is_read == False  # noqa: E712
        ).values(
            is_read=True,
            read_at=utcnow()
        )
        result = await db.execute(stmt)
        return result.rowcount
