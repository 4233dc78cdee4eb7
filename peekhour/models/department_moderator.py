from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.sql import func

from peekhour.core.database import Base

# Column name -> public permission key
PERMISSION_FIELDS = {
    "can_approve_post": "canApprovePost",
    "can_delete_post": "canDeletePost",
    "can_delete_comment": "canDeleteComment",
    "can_ban_user": "canBanUser",
    "can_create_event": "canCreateEvent",
    "can_edit_rules": "canEditRules",
}


class DepartmentModerator(Base):
    __tablename__ = "department_moderators"

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
    assigned_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Permission set: one independent flag per capability
    can_approve_post = Column(Boolean, default=True, nullable=False)
    can_delete_post = Column(Boolean, default=True, nullable=False)
    can_delete_comment = Column(Boolean, default=True, nullable=False)
    can_ban_user = Column(Boolean, default=False, nullable=False)
    can_create_event = Column(Boolean, default=True, nullable=False)
    can_edit_rules = Column(Boolean, default=False, nullable=False)

    # Timestamps
    assigned_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint(
            "department_id", "user_id", name="unique_department_moderator"
        ),
    )

    @property
    def permissions(self) -> dict:
        return {key: getattr(self, column) for column, key in PERMISSION_FIELDS.items()}

    def __repr__(self):
        return f"<DepartmentModerator(department_id={self.department_id}, user_id={self.user_id})>"
