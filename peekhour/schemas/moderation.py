# peekhour/schemas/moderation.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from peekhour.schemas.common import Pagination


class ReportCreate(BaseModel):
    target_type: str = Field(..., pattern="^(post|comment|user)$")
    target_id: int
    reason: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)


class ReportReview(BaseModel):
    action: str = Field(..., pattern="^(dismiss|remove_content|ban_user)$")
    notes: Optional[str] = None


class BanCreate(BaseModel):
    reason: str = Field(..., min_length=1)
    duration: Optional[int] = Field(None, ge=1)  # Days; omitted = permanent


class ReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    reporter_id: int
    target_type: str
    target_id: int
    reason: str
    description: Optional[str] = None
    status: str
    action_taken: Optional[str] = None
    notes: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime


class ReportListData(BaseModel):
    reports: List[ReportResponse]
    pagination: Pagination


class UserBanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    banned_by: int
    reason: str
    expires_at: Optional[datetime] = None
    is_active: bool
    created_at: datetime


class ModerationLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    moderator_id: int
    action: str
    target_type: str
    target_id: int
    reason: Optional[str] = None
    created_at: datetime


class ModerationLogListData(BaseModel):
    logs: List[ModerationLogResponse]
    pagination: Pagination
