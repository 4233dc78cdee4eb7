# peekhour/services/notification.py
import logging
import math
import re
from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from peekhour.models.notification import Notification
from peekhour.models.user import User

logger = logging.getLogger(__name__)

MENTION_PATTERN = re.compile(r"@(\w+)")


def extract_mentions(content: Optional[str]) -> List[str]:
    """Unique lower-cased @usernames, in order of first appearance"""
    if not content:
        return []
    usernames = []
    for name in MENTION_PATTERN.findall(content):
        name = name.lower()
        if name not in usernames:
            usernames.append(name)
    return usernames


class NotificationService:
    def __init__(self, db: Session):
        self.db = db

    def notify(
        self,
        recipient_id: int,
        actor_id: Optional[int],
        type: str,
        content: str,
        post_id: Optional[int] = None,
        comment_id: Optional[int] = None,
    ) -> Optional[Notification]:
        """Stage a notification in the caller's transaction.

        Nothing is committed here; the triggering operation commits the
        notification together with its own writes. Users are never notified
        about their own actions.
        """
        if actor_id is not None and recipient_id == actor_id:
            return None

        notification = Notification(
            user_id=recipient_id,
            actor_id=actor_id,
            type=type,
            content=content,
            post_id=post_id,
            comment_id=comment_id,
        )
        self.db.add(notification)
        return notification

    def notify_mentions(
        self,
        content: Optional[str],
        actor: User,
        post_id: int,
        comment_id: Optional[int] = None,
    ) -> int:
        """Stage a ``mention`` notification for every existing @username.

        Unknown names are ignored and the actor never notifies themselves.
        """
        usernames = extract_mentions(content)
        if not usernames:
            return 0

        where = "a comment" if comment_id else "a post"
        mentioned = (
            self.db.query(User)
            .filter(func.lower(User.username).in_(usernames))
            .all()
        )
        staged = 0
        for user in mentioned:
            if self.notify(
                recipient_id=user.id,
                actor_id=actor.id,
                type="mention",
                content=f"@{actor.username} mentioned you in {where}",
                post_id=post_id,
                comment_id=comment_id,
            ):
                staged += 1
        return staged

    def get_notifications(
        self,
        user_id: int,
        page: int = 1,
        size: int = 20,
        type: Optional[str] = None,
        unread_only: bool = False,
    ) -> Tuple[List[Notification], dict]:
        """Get the user's notifications, newest first"""
        query = (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id)
            .options(selectinload(Notification.actor))
        )

        if type:
            query = query.filter(Notification.type == type)
        if unread_only:
            query = query.filter(Notification.is_read == False)

        total = query.count()

        offset = (page - 1) * size
        notifications = (
            query.order_by(Notification.created_at.desc(), Notification.id.desc())
            .offset(offset)
            .limit(size)
            .all()
        )

        pagination = {
            "total": total,
            "page": page,
            "size": size,
            "total_pages": math.ceil(total / size),
        }

        return notifications, pagination

    def get_unread_count(self, user_id: int) -> int:
        return (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read == False)
            .count()
        )

    def _get_own_notification(self, notification_id: int, user_id: int) -> Notification:
        notification = (
            self.db.query(Notification)
            .filter(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
            .first()
        )
        if not notification:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Notification not found",
            )
        return notification

    def mark_as_read(self, notification_id: int, user_id: int) -> Notification:
        notification = self._get_own_notification(notification_id, user_id)
        notification.is_read = True
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def mark_all_as_read(self, user_id: int) -> int:
        """Mark every unread notification of the user as read"""
        updated = (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read == False)
            .update({Notification.is_read: True}, synchronize_session=False)
        )
        self.db.commit()
        return updated

    def delete_notification(self, notification_id: int, user_id: int) -> bool:
        notification = self._get_own_notification(notification_id, user_id)
        self.db.delete(notification)
        self.db.commit()
        return True
