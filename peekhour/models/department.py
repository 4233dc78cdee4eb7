from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from peekhour.core.database import Base


class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, index=True)

    # Basic Info
    name = Column(String(100), nullable=False, index=True)
    type = Column(String(50), nullable=False)  # college, company, society, ...
    description = Column(Text, nullable=True)
    cover_image = Column(Text, nullable=True)
    rules = Column(Text, nullable=True)

    # Location
    location = Column(String(255), nullable=True)
    country = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)

    # Settings
    is_active = Column(Boolean, default=True, nullable=False)
    require_approval = Column(
        Boolean, default=False, nullable=False
    )  # Posts wait in the approval queue

    # The creator is the implicit department admin
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

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

    def __repr__(self):
        return f"<Department(id={self.id}, name='{self.name}')>"
