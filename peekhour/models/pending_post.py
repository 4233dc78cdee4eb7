from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from peekhour.core.database import Base


class PendingPost(Base):
    __tablename__ = "pending_posts"

    id = Column(Integer, primary_key=True, index=True)

    # Foreign Keys
    post_id = Column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    department_id = Column(
        Integer,
        ForeignKey("departments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    submitted_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    reviewed_by = Column(
        Integer, ForeignKey("users.id"), nullable=True
    )  # Admin or moderator who decided

    # Approval state: pending -> approved | rejected (both terminal)
    status = Column(String(20), default="pending", nullable=False, index=True)
    rejection_reason = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<PendingPost(id={self.id}, post_id={self.post_id}, status='{self.status}')>"
