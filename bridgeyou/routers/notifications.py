"""
Notification routes. Every route acts on the caller's own notifications.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional

from bridgeyou.error_handling import error_handler
from bridgeyou.models import Notification
from .dependencies import Services, get_services, require_user_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/notifications", response_model=List[Notification])
async def list_notifications(
    limit: Optional[int] = Query(None, ge=1, le=100, description="Max notifications to return"),
    services: Services = Depends(get_services),
    user_id: str = Depends(require_user_id)
):
    """Newest notifications first."""
    try:
        return await services.notifications.get_user_notifications(
            user_id, limit=limit or services.settings.search.notifications_limit
        )
    except Exception as e:
        raise error_handler.to_http_exception("list_notifications", e, {"user_id": user_id})


@router.get("/notifications/unread-count")
async def unread_count(
    services: Services = Depends(get_services),
    user_id: str = Depends(require_user_id)
):
    try:
        count = await services.notifications.get_unread_count(user_id)
    except Exception as e:
        raise error_handler.to_http_exception("unread_count", e, {"user_id": user_id})
    return {"count": count}


@router.post("/notifications/read-all")
async def mark_all_read(
    services: Services = Depends(get_services),
    user_id: str = Depends(require_user_id)
):
    try:
        updated = await services.notifications.mark_all_as_read(user_id)
    except Exception as e:
        raise error_handler.to_http_exception("mark_all_read", e, {"user_id": user_id})
    return {"success": True, "updated": updated}


@router.post("/notifications/{notification_id}/read")
async def mark_read(
    notification_id: str,
    services: Services = Depends(get_services),
    user_id: str = Depends(require_user_id)
):
    try:
        found = await services.notifications.mark_as_read(notification_id, user_id)
    except Exception as e:
        raise error_handler.to_http_exception(
            "mark_read", e, {"notification_id": notification_id, "user_id": user_id}
        )

    if not found:
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"success": True}


@router.delete("/notifications/{notification_id}")
async def delete_notification(
    notification_id: str,
    services: Services = Depends(get_services),
    user_id: str = Depends(require_user_id)
):
    try:
        found = await services.notifications.delete(notification_id, user_id)
    except Exception as e:
        raise error_handler.to_http_exception(
            "delete_notification", e, {"notification_id": notification_id, "user_id": user_id}
        )

    if not found:
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"success": True}
