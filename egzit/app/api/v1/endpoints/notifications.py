"""
Notification API Endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from egzit.app.db.session import get_db
from egzit.app.core.dependencies import get_current_user
from egzit.app.services.notification_service import NotificationService
from egzit.app.schemas.notification import NotificationResponse

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationResponse])
async def list_notifications(
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=200),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List current user's notifications, newest first."""
    return await NotificationService.list_for_user(
        db, current_user["user_id"], unread_only=unread_only, limit=limit
    )


@router.get("/unread-count")
async def unread_notification_count(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return {"count": await NotificationService.unread_count(db, current_user["user_id"])}


@router.patch("/read-all")
async def mark_all_notifications_read(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Mark all notifications as read."""
    count = await NotificationService.mark_all_read(db, current_user["user_id"])
    await db.commit()
    return {"status": "success", "count": count}


@router.patch("/{notification_id}/read")
async def mark_notification_read(
    notification_id: int = Path(...),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Mark a specific notification as read."""
    success = await NotificationService.mark_read(db, notification_id, current_user["user_id"])
    if not success:
        raise HTTPException(status_code=404, detail="Notification not found")

    await db.commit()
    return {"status": "success"}
