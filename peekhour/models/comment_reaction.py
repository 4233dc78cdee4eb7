from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from peekhour.core.database import Base

COMMENT_REACTION_TYPES = ("like", "love", "wow", "sad", "angry")


class CommentReaction(Base):
    __tablename__ = "comment_reactions"

    id = Column(Integer, primary_key=True, index=True)

    # Foreign Keys
    comment_id = Column(
        Integer,
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    reaction_type = Column(String(20), default="like", nullable=False)

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("comment_id", "user_id", name="unique_comment_reaction"),
    )

    def __repr__(self):
        return f"<CommentReaction(comment_id={self.comment_id}, user_id={self.user_id}, type='{self.reaction_type}')>"
