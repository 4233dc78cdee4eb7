# peekhour/schemas/approval.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from peekhour.schemas.user import UserSummary


class PostSubmit(BaseModel):
    post_id: int
    department_id: int


class PostReview(BaseModel):
    # Checked by the service so an unknown action reads as a plain 400
    action: str
    rejection_reason: Optional[str] = Field(None, max_length=1000)


class PendingPostContent(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    content: Optional[str] = None
    media_type: str
    media_url: Optional[str] = None
    created_at: datetime


class PendingPostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    department_id: int
    submitted_by: int
    status: str
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: datetime

    post: PendingPostContent
    submitter: UserSummary
