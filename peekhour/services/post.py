# peekhour/services/post.py
import logging
import math
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from peekhour.core.decorator import db_exception
from peekhour.models.comment import Comment
from peekhour.models.post import Post
from peekhour.models.post_reaction import PostReaction
from peekhour.models.user import User
from peekhour.schemas.post import PostCreate, PostUpdate
from peekhour.services.department import get_department_or_404, get_membership
from peekhour.services.notification import NotificationService

logger = logging.getLogger(__name__)


class PostService:
    def __init__(self, db: Session):
        self.db = db
        self.notifications = NotificationService(db)

    def _annotate(self, posts: List[Post], user_id: Optional[int]) -> None:
        """Attach comment/reaction counts and the viewer's reaction"""
        if not posts:
            return
        ids = [p.id for p in posts]

        comments = dict(
            self.db.query(Comment.post_id, func.count(Comment.id))
            .filter(Comment.post_id.in_(ids), Comment.is_active == True)
            .group_by(Comment.post_id)
            .all()
        )
        reactions = dict(
            self.db.query(PostReaction.post_id, func.count(PostReaction.id))
            .filter(PostReaction.post_id.in_(ids))
            .group_by(PostReaction.post_id)
            .all()
        )
        own = {}
        if user_id:
            own = dict(
                self.db.query(PostReaction.post_id, PostReaction.reaction_type)
                .filter(PostReaction.post_id.in_(ids), PostReaction.user_id == user_id)
                .all()
            )

        for post in posts:
            post.comments_count = comments.get(post.id, 0)
            post.reactions_count = reactions.get(post.id, 0)
            post.user_reaction = own.get(post.id)

    @db_exception
    def create_post(self, post_in: PostCreate, user: User) -> Post:
        """Create a post, optionally inside a department.

        Posts in a department that requires approval start hidden and only
        become visible once a reviewer approves them. Mentioned users are
        notified as soon as the post is visible.
        """
        user_id = user.id
        if not post_in.content and not post_in.media_url:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Post content or media is required",
            )

        is_active = True
        if post_in.department_id is not None:
            department = get_department_or_404(self.db, post_in.department_id)
            if not department.is_active:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Department not found",
                )
            if department.created_by != user_id and not get_membership(
                self.db, department.id, user_id
            ):
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Must be a member to post in this department",
                )
            is_active = not department.require_approval

        post = Post(**post_in.model_dump(), user_id=user_id, is_active=is_active)
        self.db.add(post)
        self.db.flush()

        if is_active:
            self.notifications.notify_mentions(post.content, user, post.id)

        self.db.commit()
        self.db.refresh(post)

        self._annotate([post], user_id)
        return post

    def get_post(self, post_id: int, user_id: Optional[int] = None) -> Post:
        """Get a visible post; authors also see their own hidden posts"""
        post = (
            self.db.query(Post)
            .filter(Post.id == post_id)
            .options(selectinload(Post.author))
            .first()
        )
        if (
            not post
            or post.deleted_at is not None
            or (not post.is_active and post.user_id != user_id)
        ):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Post not found"
            )

        self._annotate([post], user_id)
        return post

    def get_department_posts(
        self,
        department_id: int,
        page: int = 1,
        size: int = 20,
        user_id: Optional[int] = None,
    ) -> Tuple[List[Post], dict]:
        """Get visible posts of a department, newest first"""
        get_department_or_404(self.db, department_id)

        query = (
            self.db.query(Post)
            .filter(Post.department_id == department_id, Post.is_active == True)
            .options(selectinload(Post.author))
        )

        total = query.count()

        offset = (page - 1) * size
        posts = (
            query.order_by(Post.created_at.desc(), Post.id.desc())
            .offset(offset)
            .limit(size)
            .all()
        )
        self._annotate(posts, user_id)

        pagination = {
            "total": total,
            "page": page,
            "size": size,
            "total_pages": math.ceil(total / size),
        }

        return posts, pagination

    @db_exception
    def update_post(self, post_id: int, post_in: PostUpdate, user_id: int) -> Post:
        post = self.db.query(Post).filter(Post.id == post_id).first()
        if not post or post.deleted_at is not None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Post not found"
            )

        # Check if user is the author
        if post.user_id != user_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only the post author can edit this post",
            )

        if post_in.content is not None:
            post.content = post_in.content
            post.is_edited = True
            post.edited_at = datetime.now(timezone.utc)

        self.db.commit()
        self.db.refresh(post)

        self._annotate([post], user_id)
        return post

    @db_exception
    def delete_post(self, post_id: int, user_id: int) -> bool:
        """Delete a post (soft delete)"""
        post = self.db.query(Post).filter(Post.id == post_id).first()
        if not post or post.deleted_at is not None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Post not found"
            )

        if post.user_id != user_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only the post author can delete this post",
            )

        post.is_active = False
        post.deleted_at = datetime.now(timezone.utc)
        self.db.commit()
        return True
