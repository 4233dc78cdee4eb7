# peekhour/models/report.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from peekhour.core.database import Base


class Report(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True)

    # Foreign Keys
    reporter_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    reviewed_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Reported content: post, comment or user. Polymorphic, so no FK on target_id
    target_type = Column(String(20), nullable=False)
    target_id = Column(Integer, nullable=False, index=True)

    reason = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)

    # Review
    status = Column(
        String(20), default="pending", nullable=False, index=True
    )  # pending, resolved, dismissed
    action_taken = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self):
        return f"<Report(id={self.id}, target={self.target_type}:{self.target_id}, status='{self.status}')>"
