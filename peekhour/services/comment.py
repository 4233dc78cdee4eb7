# peekhour/services/comment.py
import logging
import math
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import Integer, func, literal_column, select
from sqlalchemy.orm import Session, aliased, selectinload

from peekhour.core.config import settings
from peekhour.core.decorator import db_exception
from peekhour.models.comment import Comment
from peekhour.models.comment_reaction import CommentReaction
from peekhour.models.post import Post
from peekhour.models.user import User
from peekhour.services.notification import NotificationService

logger = logging.getLogger(__name__)


def _require_content(content: Optional[str]) -> str:
    if content is None or not content.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Comment content is required",
        )
    return content.strip()


class CommentService:
    def __init__(self, db: Session):
        self.db = db
        self.notifications = NotificationService(db)

    # ==================== Lookups ====================

    def _get_post(self, post_id: int, user_id: Optional[int] = None) -> Post:
        """Get a visible post; authors also reach their own hidden posts"""
        post = self.db.query(Post).filter(Post.id == post_id).first()
        if (
            not post
            or post.deleted_at is not None
            or (not post.is_active and post.user_id != user_id)
        ):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Post not found"
            )
        return post

    def _get_comment(self, comment_id: int) -> Comment:
        comment = (
            self.db.query(Comment)
            .filter(Comment.id == comment_id)
            .options(selectinload(Comment.author))
            .first()
        )
        if not comment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found"
            )
        return comment

    def _annotate(self, comments: List[Comment], user_id: Optional[int]) -> None:
        """Attach reply/reaction counts and the viewer's reaction to each comment"""
        if not comments:
            return
        ids = [c.id for c in comments]

        replies = dict(
            self.db.query(Comment.parent_comment_id, func.count(Comment.id))
            .filter(Comment.parent_comment_id.in_(ids), Comment.is_active == True)
            .group_by(Comment.parent_comment_id)
            .all()
        )
        reactions = dict(
            self.db.query(CommentReaction.comment_id, func.count(CommentReaction.id))
            .filter(CommentReaction.comment_id.in_(ids))
            .group_by(CommentReaction.comment_id)
            .all()
        )
        own: Dict[int, str] = {}
        if user_id:
            own = dict(
                self.db.query(CommentReaction.comment_id, CommentReaction.reaction_type)
                .filter(
                    CommentReaction.comment_id.in_(ids),
                    CommentReaction.user_id == user_id,
                )
                .all()
            )

        for comment in comments:
            comment.replies_count = replies.get(comment.id, 0)
            comment.reactions_count = reactions.get(comment.id, 0)
            comment.user_reaction = own.get(comment.id)
            comment.has_reacted = comment.id in own

    # ==================== Writes ====================

    @db_exception
    def add_comment(self, post_id: int, content: Optional[str], user: User) -> Comment:
        """Add a root comment to a visible post"""
        text = _require_content(content)
        post = self._get_post(post_id)

        comment = Comment(post_id=post.id, user_id=user.id, content=text, depth=0)
        self.db.add(comment)
        self.db.flush()

        self.notifications.notify(
            recipient_id=post.user_id,
            actor_id=user.id,
            type="comment",
            content=f"{user.name} commented on your post",
            post_id=post.id,
            comment_id=comment.id,
        )
        self.notifications.notify_mentions(text, user, post.id, comment.id)

        self.db.commit()
        self.db.refresh(comment)
        logger.info(f"Comment {comment.id} added to post {post.id} by user {user.id}")
        return comment

    @db_exception
    def create_reply(
        self,
        post_id: int,
        parent_comment_id: int,
        content: Optional[str],
        user: User,
    ) -> Comment:
        """Reply to a comment one level deeper than its parent.

        The reply and the parent author's notification commit together.
        """
        text = _require_content(content)

        parent = (
            self.db.query(Comment).filter(Comment.id == parent_comment_id).first()
        )
        if not parent or not parent.is_active or parent.post_id != post_id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Parent comment not found",
            )

        depth = parent.depth + 1
        if depth > settings.comment_max_depth:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Maximum nesting depth reached",
            )

        post = self._get_post(post_id)

        reply = Comment(
            post_id=post.id,
            user_id=user.id,
            parent_comment_id=parent.id,
            depth=depth,
            content=text,
        )
        self.db.add(reply)
        self.db.flush()

        self.notifications.notify(
            recipient_id=parent.user_id,
            actor_id=user.id,
            type="reply",
            content=f"{user.name} replied to your comment",
            post_id=post.id,
            comment_id=reply.id,
        )
        self.notifications.notify_mentions(text, user, post.id, reply.id)

        self.db.commit()
        self.db.refresh(reply)
        logger.info(
            f"Reply {reply.id} (depth {depth}) created under comment {parent.id}"
        )
        return reply

    @db_exception
    def update_comment(
        self, comment_id: int, content: Optional[str], user_id: int
    ) -> Comment:
        comment = self._get_comment(comment_id)

        if comment.user_id != user_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only the comment author can edit this comment",
            )

        comment.content = _require_content(content)
        comment.edited_at = datetime.now(timezone.utc)

        self.db.commit()
        self.db.refresh(comment)
        return comment

    @db_exception
    def delete_comment(self, comment_id: int, user_id: int) -> bool:
        """Hard delete by the author.

        Replies go with it through the ON DELETE CASCADE foreign key.
        """
        comment = self.db.query(Comment).filter(Comment.id == comment_id).first()
        if not comment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found"
            )

        if comment.user_id != user_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only the comment author can delete this comment",
            )

        self.db.delete(comment)
        self.db.commit()
        logger.info(f"Comment {comment_id} deleted by its author")
        return True

    # ==================== Reads ====================

    def get_comments(
        self,
        post_id: int,
        page: int = 1,
        size: int = 20,
        user_id: Optional[int] = None,
    ) -> Tuple[List[Comment], dict]:
        """Get root comments of a post, oldest first"""
        self._get_post(post_id, user_id)

        query = (
            self.db.query(Comment)
            .filter(
                Comment.post_id == post_id,
                Comment.parent_comment_id.is_(None),
                Comment.is_active == True,
            )
            .options(selectinload(Comment.author))
        )

        total = query.count()

        offset = (page - 1) * size
        comments = (
            query.order_by(Comment.created_at.asc(), Comment.id.asc())
            .offset(offset)
            .limit(size)
            .all()
        )
        self._annotate(comments, user_id)

        pagination = {
            "total": total,
            "page": page,
            "size": size,
            "total_pages": math.ceil(total / size),
        }

        return comments, pagination

    def get_replies(
        self, comment_id: int, user_id: Optional[int] = None
    ) -> List[Comment]:
        """Get the direct replies of a comment, oldest first"""
        comment = self._get_comment(comment_id)
        if not comment.is_active:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found"
            )
        self._get_post(comment.post_id, user_id)

        replies = (
            self.db.query(Comment)
            .filter(Comment.parent_comment_id == comment_id, Comment.is_active == True)
            .options(selectinload(Comment.author))
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .all()
        )
        self._annotate(replies, user_id)
        return replies

    def get_thread(
        self, comment_id: int, user_id: Optional[int] = None
    ) -> List[Comment]:
        """Get a comment and all of its descendants in pre-order.

        A recursive CTE collects (id, parent, level) rows bounded by the
        maximum depth. The tree is then rebuilt from an id -> comment map and
        a parent -> children index, and walked depth-first so every reply
        follows its parent and precedes its parent's later siblings. Each
        comment carries ``level`` (0 for the requested root) and ``path``
        (ids from the root down to itself).
        """
        root = self.db.query(Comment).filter(Comment.id == comment_id).first()
        if not root or not root.is_active:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found"
            )
        self._get_post(root.post_id, user_id)

        thread = (
            select(
                Comment.id,
                Comment.parent_comment_id,
                literal_column("0", Integer).label("level"),
            )
            .where(Comment.id == comment_id)
            .cte(name="comment_thread", recursive=True)
        )
        parent_row = thread.alias()
        child = aliased(Comment)
        thread = thread.union_all(
            select(
                child.id,
                child.parent_comment_id,
                (parent_row.c.level + 1).label("level"),
            ).where(
                child.parent_comment_id == parent_row.c.id,
                child.is_active == True,
                parent_row.c.level < settings.comment_max_depth,
            )
        )

        rows = self.db.execute(
            select(thread.c.id, thread.c.parent_comment_id, thread.c.level)
        ).all()

        by_id: Dict[int, Comment] = {
            c.id: c
            for c in self.db.query(Comment)
            .filter(Comment.id.in_([row.id for row in rows]))
            .options(selectinload(Comment.author))
            .all()
        }
        children: Dict[int, List[int]] = {}
        levels = {row.id: row.level for row in rows}
        for row in rows:
            if row.id != comment_id:
                children.setdefault(row.parent_comment_id, []).append(row.id)
        for siblings in children.values():
            siblings.sort(key=lambda cid: (by_id[cid].created_at, cid))

        ordered: List[Comment] = []
        stack = [(comment_id, [comment_id])]
        while stack:
            node_id, path = stack.pop()
            node = by_id[node_id]
            node.level = levels[node_id]
            node.path = path
            ordered.append(node)
            # Push in reverse so the earliest sibling is visited first
            for child_id in reversed(children.get(node_id, [])):
                stack.append((child_id, path + [child_id]))

        self._annotate(ordered, user_id)
        return ordered
