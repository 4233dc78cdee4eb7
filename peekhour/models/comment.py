# peekhour/models/comment.py
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.sql import func

from peekhour.core.database import Base


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)

    # Foreign Keys
    post_id = Column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    parent_comment_id = Column(
        Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True
    )  # For nested replies; deleting a comment removes its subtree

    # Distance from the thread root (0 = root), stored so the depth cap is a
    # single lookup at write time
    depth = Column(Integer, default=0, nullable=False)

    # Content
    content = Column(Text, nullable=False)

    # False once removed by a moderator; owner deletes remove the row
    is_active = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
    edited_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Comment(id={self.id}, post_id={self.post_id}, depth={self.depth})>"
