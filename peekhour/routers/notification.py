# peekhour/routers/notification.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from peekhour.core.config import settings
from peekhour.core.database import get_db
from peekhour.core.dependencies import get_current_user
from peekhour.models.user import User
from peekhour.schemas.common import ApiResponse
from peekhour.schemas.notification import (
    NotificationListData,
    NotificationResponse,
    UnreadCount,
)
from peekhour.services.notification import NotificationService

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("", response_model=ApiResponse[NotificationListData])
def get_notifications(
    page: int = Query(1, ge=1),
    size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    type: Optional[str] = None,
    unread_only: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get your notifications, newest first"""
    service = NotificationService(db)
    notifications, pagination = service.get_notifications(
        current_user.id, page, size, type, unread_only
    )
    return {
        "data": {
            "notifications": notifications,
            "unread_count": service.get_unread_count(current_user.id),
            "pagination": pagination,
        }
    }


@router.get("/unread-count", response_model=ApiResponse[UnreadCount])
def get_unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = NotificationService(db)
    return {"data": {"count": service.get_unread_count(current_user.id)}}


@router.patch("/read-all", response_model=ApiResponse)
def mark_all_as_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = NotificationService(db)
    updated = service.mark_all_as_read(current_user.id)
    return {"message": f"{updated} notifications marked as read"}


@router.patch("/{notification_id}/read", response_model=ApiResponse[NotificationResponse])
def mark_as_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = NotificationService(db)
    notification = service.mark_as_read(notification_id, current_user.id)
    return {"message": "Notification marked as read", "data": notification}


@router.delete("/{notification_id}", response_model=ApiResponse)
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = NotificationService(db)
    service.delete_notification(notification_id, current_user.id)
    return {"message": "Notification deleted successfully"}
