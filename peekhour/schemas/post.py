# peekhour/schemas/post.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from peekhour.schemas.common import Pagination
from peekhour.schemas.user import UserSummary

MEDIA_TYPE_PATTERN = "^(none|photo|video|audio|text)$"


class PostLocation(BaseModel):
    country: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    city: Optional[str] = Field(None, max_length=100)
    area: Optional[str] = Field(None, max_length=100)
    street: Optional[str] = Field(None, max_length=255)
    pin_code: Optional[str] = Field(None, max_length=20)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class PostCreate(PostLocation):
    content: Optional[str] = Field(None, max_length=10000)
    media_type: str = Field(default="none", pattern=MEDIA_TYPE_PATTERN)
    media_url: Optional[str] = None  # Already uploaded by the media service
    department_id: Optional[int] = None


class PostUpdate(BaseModel):
    content: Optional[str] = Field(None, max_length=10000)


class PostResponse(PostLocation):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    department_id: Optional[int] = None
    content: Optional[str] = None
    media_type: str
    media_url: Optional[str] = None
    is_active: bool
    is_edited: bool
    created_at: datetime
    updated_at: datetime
    edited_at: Optional[datetime] = None

    author: UserSummary

    # Annotated by the service
    comments_count: int = 0
    reactions_count: int = 0
    user_reaction: Optional[str] = None


class PostListData(BaseModel):
    posts: List[PostResponse]
    pagination: Pagination
