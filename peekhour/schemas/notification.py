# peekhour/schemas/notification.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from peekhour.schemas.common import Pagination
from peekhour.schemas.user import UserSummary


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    actor_id: Optional[int] = None
    type: str
    content: str
    post_id: Optional[int] = None
    comment_id: Optional[int] = None
    is_read: bool
    created_at: datetime

    actor: Optional[UserSummary] = None


class NotificationListData(BaseModel):
    notifications: List[NotificationResponse]
    unread_count: int
    pagination: Pagination


class UnreadCount(BaseModel):
    count: int
