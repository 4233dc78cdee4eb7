from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from peekhour.core.database import Base


class DepartmentMember(Base):
    __tablename__ = "department_members"

    id = Column(Integer, primary_key=True, index=True)

    # Foreign Keys
    department_id = Column(
        Integer,
        ForeignKey("departments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Role in department
    role = Column(String(20), default="member", nullable=False)  # 'admin', 'member'

    # Timestamps
    joined_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("department_id", "user_id", name="unique_department_member"),
    )

    def __repr__(self):
        return f"<DepartmentMember(department_id={self.department_id}, user_id={self.user_id}, role='{self.role}')>"
