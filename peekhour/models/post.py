# peekhour/models/post.py
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.sql import func

from peekhour.core.database import Base


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)

    # Foreign Keys
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    department_id = Column(
        Integer, ForeignKey("departments.id"), nullable=True, index=True
    )

    # Content
    content = Column(Text, nullable=True)  # Optional if only media
    media_type = Column(
        String(20), default="none", nullable=False
    )  # none, photo, video, audio, text
    media_url = Column(Text, nullable=True)  # Path handed over by the upload service

    # Location tag
    country = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)
    area = Column(String(100), nullable=True)
    street = Column(String(255), nullable=True)
    pin_code = Column(String(20), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    post_date = Column(Date, server_default=func.current_date(), nullable=True)

    # Visibility: false while awaiting approval, after rejection or removal
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    is_edited = Column(Boolean, default=False, nullable=False)

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
    # Set when the author deletes the post or a moderator takes it down;
    # such posts stay hidden for good
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Post(id={self.id}, user_id={self.user_id}, department_id={self.department_id})>"
