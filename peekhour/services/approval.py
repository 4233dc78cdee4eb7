# peekhour/services/approval.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from peekhour.models.department import Department
from peekhour.models.pending_post import PendingPost
from peekhour.models.post import Post
from peekhour.services.department import get_department_or_404, require_permission
from peekhour.services.notification import NotificationService

logger = logging.getLogger(__name__)

REVIEW_ACTIONS = {"approve": "approved", "reject": "rejected"}
DEFAULT_REJECTION_REASON = "No reason provided"


class PostApprovalService:
    """Pre-publication queue for departments that require approval.

    A queue row moves from ``pending`` to ``approved`` or ``rejected`` once
    and never again. The post is hidden while pending and after rejection.
    """

    def __init__(self, db: Session):
        self.db = db
        self.notifications = NotificationService(db)

    def submit_post(self, post_id: int, department_id: int, user_id: int) -> PendingPost:
        post = (
            self.db.query(Post)
            .filter(
                Post.id == post_id,
                Post.user_id == user_id,
                Post.department_id == department_id,
                Post.deleted_at.is_(None),
            )
            .first()
        )
        if not post:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Post not found"
            )

        # Any earlier queue row blocks resubmission, whatever its outcome
        existing = (
            self.db.query(PendingPost).filter(PendingPost.post_id == post_id).first()
        )
        if existing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Post already submitted for approval",
            )

        pending = PendingPost(
            post_id=post_id, department_id=department_id, submitted_by=user_id
        )
        try:
            self.db.add(pending)
            post.is_active = False
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.error(f"Failed to submit post {post_id}", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to submit post",
            )

        self.db.refresh(pending)
        logger.info(f"Post {post_id} submitted for approval in department {department_id}")
        return pending

    def _require_reviewer(
        self, department: Department, user_id: int, not_moderator_detail: str
    ) -> None:
        require_permission(
            self.db,
            department,
            user_id,
            "can_approve_post",
            not_moderator_detail=not_moderator_detail,
            denied_detail="You do not have permission to approve posts",
        )

    def get_pending_posts(self, department_id: int, user_id: int) -> List[PendingPost]:
        """Pending queue of a department, newest first"""
        department = get_department_or_404(self.db, department_id)
        self._require_reviewer(
            department, user_id, "Only admins and moderators can view pending posts"
        )

        return (
            self.db.query(PendingPost)
            .join(Post, PendingPost.post_id == Post.id)
            .filter(
                PendingPost.department_id == department_id,
                PendingPost.status == "pending",
                Post.deleted_at.is_(None),
            )
            .options(
                selectinload(PendingPost.post),
                selectinload(PendingPost.submitter),
            )
            .order_by(PendingPost.created_at.desc(), PendingPost.id.desc())
            .all()
        )

    def review_post(
        self,
        post_id: int,
        action: str,
        user_id: int,
        rejection_reason: Optional[str] = None,
    ) -> PendingPost:
        """Approve or reject a pending post.

        The queue row, the post's visibility and the submitter's
        notification (plus mention notifications on approval) are committed
        together or not at all.
        """
        if action not in REVIEW_ACTIONS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid action"
            )

        pending = (
            self.db.query(PendingPost)
            .join(Post, PendingPost.post_id == Post.id)
            .filter(
                PendingPost.post_id == post_id,
                PendingPost.status == "pending",
                # A post deleted while waiting is never published
                Post.deleted_at.is_(None),
            )
            .first()
        )
        if not pending:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Pending post not found",
            )

        department = get_department_or_404(self.db, pending.department_id)
        self._require_reviewer(
            department, user_id, "Only admins and moderators can review posts"
        )

        post = self.db.query(Post).filter(Post.id == post_id).one()
        new_status = REVIEW_ACTIONS[action]

        try:
            pending.status = new_status
            pending.reviewed_by = user_id
            pending.reviewed_at = datetime.now(timezone.utc)

            if action == "approve":
                post.is_active = True
                message = f"Your post in {department.name} was approved"
                self.notifications.notify_mentions(post.content, post.author, post_id)
            else:
                pending.rejection_reason = rejection_reason or DEFAULT_REJECTION_REASON
                post.is_active = False
                message = (
                    f"Your post in {department.name} was rejected: "
                    f"{pending.rejection_reason}"
                )

            self.notifications.notify(
                recipient_id=pending.submitted_by,
                actor_id=user_id,
                type=f"post_{new_status}",
                content=message,
                post_id=post_id,
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.error(f"Failed to review post {post_id}", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to review post",
            )

        self.db.refresh(pending)
        logger.info(f"Post {post_id} {new_status} by user {user_id}")
        return pending
