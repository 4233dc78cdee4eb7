# peekhour/schemas/comment.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from peekhour.schemas.common import Pagination
from peekhour.schemas.user import UserSummary


class CommentCreate(BaseModel):
    # Emptiness is checked by the service so the error text stays consistent
    content: Optional[str] = Field(None, max_length=5000)


class CommentUpdate(BaseModel):
    content: Optional[str] = Field(None, max_length=5000)


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    user_id: int
    parent_comment_id: Optional[int] = None
    depth: int
    content: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    edited_at: Optional[datetime] = None

    author: UserSummary

    # Annotated by the service
    replies_count: int = 0
    reactions_count: int = 0
    user_reaction: Optional[str] = None
    has_reacted: bool = False


class ThreadCommentResponse(CommentResponse):
    level: int
    path: List[int]


class CommentListData(BaseModel):
    comments: List[CommentResponse]
    pagination: Pagination
