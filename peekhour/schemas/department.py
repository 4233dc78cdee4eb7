# peekhour/schemas/department.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from peekhour.schemas.user import UserSummary


class DepartmentCreate(BaseModel):
    name: str = Field(..., min_length=3, max_length=100)
    type: str = Field(..., min_length=2, max_length=50)
    description: Optional[str] = None
    location: Optional[str] = Field(None, max_length=255)
    country: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    city: Optional[str] = Field(None, max_length=100)
    rules: Optional[str] = None
    require_approval: bool = False


class DepartmentSettingsUpdate(BaseModel):
    cover_image: Optional[str] = None
    rules: Optional[str] = None
    require_approval: Optional[bool] = None


class DepartmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    type: str
    description: Optional[str] = None
    cover_image: Optional[str] = None
    rules: Optional[str] = None
    location: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    require_approval: bool
    is_active: bool
    created_by: int
    created_at: datetime
    updated_at: datetime

    # Annotated by the service
    members_count: int = 0
    is_member: bool = False
    user_role: Optional[str] = None


class DepartmentMemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    department_id: int
    user_id: int
    role: str
    joined_at: datetime
    user: UserSummary
