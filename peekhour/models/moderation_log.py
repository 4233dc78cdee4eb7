from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from peekhour.core.database import Base


class ModerationLog(Base):
    __tablename__ = "moderation_logs"

    id = Column(Integer, primary_key=True, index=True)

    moderator_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    action = Column(String(50), nullable=False)  # dismiss, remove_content, ban_user, ...
    target_type = Column(String(20), nullable=False)
    target_id = Column(Integer, nullable=False)
    reason = Column(Text, nullable=True)

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self):
        return f"<ModerationLog(id={self.id}, action='{self.action}')>"
