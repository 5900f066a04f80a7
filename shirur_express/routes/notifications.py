# shirur_express/routes/notifications.py
from fastapi import APIRouter, Depends
from typing import List, Literal
from uuid import UUID
import asyncpg

from ..database import get_db
from ..errors import NotFoundError
from ..models.auth import RequestContext
from ..models.notification import NotificationOut
from ..queries import notification_queries
from ..utils.auth import get_current_user

notifications_router = APIRouter(prefix="/notifications", tags=["Notifications"])

@notifications_router.get("/", response_model=List[NotificationOut])
async def get_notifications(
    status: Literal["all", "read", "unread"] = "all",
    ctx: RequestContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    return await notification_queries.get_notifications(conn, ctx.user_id, status)

@notifications_router.get("/unread/count")
async def get_unread_notification_count(
    ctx: RequestContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    return {"count": await notification_queries.count_unread(conn, ctx.user_id)}

@notifications_router.put("/mark-all-read")
async def mark_all_read(
    ctx: RequestContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    await notification_queries.mark_all_read(conn, ctx.user_id)
    return {"message": "All notifications marked as read"}

@notifications_router.put("/{notification_id}/mark-read")
async def mark_notification_read(
    notification_id: UUID,
    ctx: RequestContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    if not await notification_queries.mark_read(conn, str(notification_id), ctx.user_id):
        raise NotFoundError("Notification not found")
    return {"message": "Notification marked as read"}

__all__ = ["notifications_router"]
