# peekhour/schemas/event.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from peekhour.schemas.user import UserSummary


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    event_type: Optional[str] = Field(None, max_length=50)
    location: Optional[str] = Field(None, max_length=255)
    start_time: datetime
    end_time: Optional[datetime] = None
    max_attendees: Optional[int] = Field(None, ge=1)


class EventRSVP(BaseModel):
    status: str = Field(..., pattern="^(going|maybe|not_going)$")


class EventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    department_id: int
    created_by: int
    title: str
    description: Optional[str] = None
    event_type: Optional[str] = None
    location: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    max_attendees: Optional[int] = None
    is_active: bool
    created_at: datetime

    creator: UserSummary

    # Annotated by the service
    going_count: int = 0
    maybe_count: int = 0
    user_status: Optional[str] = None


class EventAttendeeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    status: str
    created_at: datetime
    user: UserSummary


class RSVPResult(BaseModel):
    event_id: int
    status: str


class EventAttendeesData(BaseModel):
    attendees: List[EventAttendeeResponse]
    total: int
