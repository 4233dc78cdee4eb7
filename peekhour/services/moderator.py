# peekhour/services/moderator.py
import logging
from datetime import datetime, timezone
from typing import List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, selectinload

from peekhour.core.decorator import db_exception
from peekhour.models.comment import Comment
from peekhour.models.department_moderator import DepartmentModerator
from peekhour.models.post import Post
from peekhour.schemas.moderator import (
    ModeratorPermissions,
    ModeratorPermissionsPatch,
)
from peekhour.services.department import (
    get_department_or_404,
    get_membership,
    get_moderator,
    require_department_admin,
    require_permission,
)

logger = logging.getLogger(__name__)


class ModeratorService:
    """Department moderators and the actions their permission set unlocks.

    Moderator routes address a moderator by their user id.
    """

    def __init__(self, db: Session):
        self.db = db

    def _load(self, moderator_id: int) -> DepartmentModerator:
        return (
            self.db.query(DepartmentModerator)
            .filter(DepartmentModerator.id == moderator_id)
            .options(
                selectinload(DepartmentModerator.user),
                selectinload(DepartmentModerator.assigner),
            )
            .one()
        )

    @db_exception
    def add_moderator(
        self,
        department_id: int,
        user_id: int,
        permissions: ModeratorPermissions,
        current_user_id: int,
    ) -> DepartmentModerator:
        department = get_department_or_404(self.db, department_id)
        require_department_admin(
            department, current_user_id, "Only department admin can add moderators"
        )

        if not get_membership(self.db, department_id, user_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User must be a member to become moderator",
            )
        if get_moderator(self.db, department_id, user_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User is already a moderator",
            )

        moderator = DepartmentModerator(
            department_id=department_id,
            user_id=user_id,
            assigned_by=current_user_id,
            **permissions.model_dump(),
        )
        self.db.add(moderator)
        self.db.commit()

        logger.info(
            f"User {user_id} made moderator of department {department_id} "
            f"with {moderator.permissions}"
        )
        return self._load(moderator.id)

    @db_exception
    def remove_moderator(
        self, department_id: int, moderator_id: int, current_user_id: int
    ) -> bool:
        department = get_department_or_404(self.db, department_id)
        require_department_admin(
            department, current_user_id, "Only department admin can remove moderators"
        )

        moderator = get_moderator(self.db, department_id, moderator_id)
        if not moderator:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Moderator not found"
            )

        self.db.delete(moderator)
        self.db.commit()
        logger.info(f"User {moderator_id} removed as moderator of {department_id}")
        return True

    def get_moderators(self, department_id: int) -> List[DepartmentModerator]:
        """Moderators of a department, most recently assigned first"""
        get_department_or_404(self.db, department_id)

        return (
            self.db.query(DepartmentModerator)
            .filter(DepartmentModerator.department_id == department_id)
            .options(
                selectinload(DepartmentModerator.user),
                selectinload(DepartmentModerator.assigner),
            )
            .order_by(
                DepartmentModerator.assigned_at.desc(), DepartmentModerator.id.desc()
            )
            .all()
        )

    @db_exception
    def update_permissions(
        self,
        department_id: int,
        moderator_id: int,
        patch: ModeratorPermissionsPatch,
        current_user_id: int,
    ) -> DepartmentModerator:
        """Change only the permission flags named in the request"""
        department = get_department_or_404(self.db, department_id)
        require_department_admin(
            department, current_user_id, "Only department admin can update permissions"
        )

        moderator = get_moderator(self.db, department_id, moderator_id)
        if not moderator:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Moderator not found"
            )

        for field, value in patch.model_dump(exclude_unset=True).items():
            if value is None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Permission {field} must be true or false",
                )
            setattr(moderator, field, value)

        self.db.commit()
        logger.info(
            f"Permissions of moderator {moderator_id} in department {department_id} "
            f"set to {moderator.permissions}"
        )
        return self._load(moderator.id)

    # ==================== Moderation actions ====================

    @db_exception
    def remove_post(self, department_id: int, post_id: int, user_id: int) -> bool:
        """Hide a department post (soft delete)"""
        department = get_department_or_404(self.db, department_id)
        require_permission(
            self.db,
            department,
            user_id,
            "can_delete_post",
            not_moderator_detail="Only admins and moderators can delete posts",
            denied_detail="You do not have permission to delete posts",
        )

        post = (
            self.db.query(Post)
            .filter(Post.id == post_id, Post.department_id == department_id)
            .first()
        )
        if not post:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Post not found"
            )

        post.is_active = False
        post.deleted_at = datetime.now(timezone.utc)
        self.db.commit()
        logger.info(f"Post {post_id} removed from department {department_id} by {user_id}")
        return True

    @db_exception
    def remove_comment(self, department_id: int, comment_id: int, user_id: int) -> bool:
        """Hide a comment on a department post (soft delete).

        Unlike the author's own delete, the row and its replies stay in place.
        """
        department = get_department_or_404(self.db, department_id)
        require_permission(
            self.db,
            department,
            user_id,
            "can_delete_comment",
            not_moderator_detail="Only admins and moderators can delete comments",
            denied_detail="You do not have permission to delete comments",
        )

        comment = (
            self.db.query(Comment)
            .join(Post, Comment.post_id == Post.id)
            .filter(Comment.id == comment_id, Post.department_id == department_id)
            .first()
        )
        if not comment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found"
            )

        comment.is_active = False
        self.db.commit()
        logger.info(
            f"Comment {comment_id} removed in department {department_id} by {user_id}"
        )
        return True
