# peekhour/services/reaction.py
import logging
from typing import Tuple

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from peekhour.core.decorator import db_exception
from peekhour.models.comment import Comment
from peekhour.models.comment_reaction import COMMENT_REACTION_TYPES, CommentReaction
from peekhour.models.post import Post
from peekhour.models.post_reaction import POST_REACTION_TYPES, PostReaction
from peekhour.models.user import User
from peekhour.services.notification import NotificationService

logger = logging.getLogger(__name__)

RECENT_REACTORS_LIMIT = 20


class ReactionService:
    """Toggle-style reactions on posts and comments.

    Reacting with the type already stored removes the reaction, a different
    type replaces it in place, so a user never has more than one row per
    target.
    """

    def __init__(self, db: Session):
        self.db = db
        self.notifications = NotificationService(db)

    @staticmethod
    def _check_type(reaction_type: str, allowed: tuple) -> None:
        if reaction_type not in allowed:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid reaction type",
            )

    @db_exception
    def toggle_post_reaction(
        self, post_id: int, reaction_type: str, user: User
    ) -> Tuple[dict, str]:
        self._check_type(reaction_type, POST_REACTION_TYPES)

        post = (
            self.db.query(Post)
            .filter(Post.id == post_id, Post.is_active == True)
            .first()
        )
        if not post:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Post not found"
            )
        if post.user_id == user.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot react to your own post",
            )

        existing = (
            self.db.query(PostReaction)
            .filter(PostReaction.post_id == post_id, PostReaction.user_id == user.id)
            .first()
        )

        if existing and existing.reaction_type == reaction_type:
            self.db.delete(existing)
            self.db.commit()
            return {"reacted": False, "reaction_type": None}, "Reaction removed"

        if existing:
            existing.reaction_type = reaction_type
            message = "Reaction updated"
        else:
            self.db.add(
                PostReaction(
                    post_id=post_id, user_id=user.id, reaction_type=reaction_type
                )
            )
            message = "Reaction added"

        self.notifications.notify(
            recipient_id=post.user_id,
            actor_id=user.id,
            type="reaction",
            content=f"{user.name} reacted {reaction_type} to your post",
            post_id=post.id,
        )
        self.db.commit()
        return {"reacted": True, "reaction_type": reaction_type}, message

    @db_exception
    def toggle_comment_reaction(
        self, comment_id: int, reaction_type: str, user: User
    ) -> Tuple[dict, str]:
        self._check_type(reaction_type, COMMENT_REACTION_TYPES)

        comment = self.db.query(Comment).filter(Comment.id == comment_id).first()
        if not comment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found"
            )
        if comment.user_id == user.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot react to your own comment",
            )

        existing = (
            self.db.query(CommentReaction)
            .filter(
                CommentReaction.comment_id == comment_id,
                CommentReaction.user_id == user.id,
            )
            .first()
        )

        if existing and existing.reaction_type == reaction_type:
            self.db.delete(existing)
            self.db.commit()
            return {"reacted": False, "reaction_type": None}, "Reaction removed"

        if existing:
            existing.reaction_type = reaction_type
            message = "Reaction updated"
        else:
            self.db.add(
                CommentReaction(
                    comment_id=comment_id, user_id=user.id, reaction_type=reaction_type
                )
            )
            message = "Reaction added"

        self.notifications.notify(
            recipient_id=comment.user_id,
            actor_id=user.id,
            type="reaction",
            content=f"{user.name} reacted {reaction_type} to your comment",
            post_id=comment.post_id,
            comment_id=comment.id,
        )
        self.db.commit()
        return {"reacted": True, "reaction_type": reaction_type}, message

    def get_post_reactions(self, post_id: int) -> dict:
        """Counts per type plus the most recent reactors"""
        post = self.db.query(Post).filter(Post.id == post_id).first()
        if not post:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Post not found"
            )

        counts = dict(
            self.db.query(PostReaction.reaction_type, func.count(PostReaction.id))
            .filter(PostReaction.post_id == post_id)
            .group_by(PostReaction.reaction_type)
            .all()
        )
        recent = (
            self.db.query(PostReaction)
            .filter(PostReaction.post_id == post_id)
            .options(selectinload(PostReaction.user))
            .order_by(PostReaction.created_at.desc(), PostReaction.id.desc())
            .limit(RECENT_REACTORS_LIMIT)
            .all()
        )

        return {"counts": counts, "total": sum(counts.values()), "recent": recent}

    def get_comment_reactions(self, comment_id: int) -> dict:
        comment = self.db.query(Comment).filter(Comment.id == comment_id).first()
        if not comment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found"
            )

        counts = dict(
            self.db.query(CommentReaction.reaction_type, func.count(CommentReaction.id))
            .filter(CommentReaction.comment_id == comment_id)
            .group_by(CommentReaction.reaction_type)
            .all()
        )

        return {"counts": counts, "total": sum(counts.values())}
