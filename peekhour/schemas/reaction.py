# peekhour/schemas/reaction.py
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from peekhour.schemas.user import UserSummary


class ReactionCreate(BaseModel):
    reaction_type: str = Field(default="like", max_length=20)


class ReactionToggleResult(BaseModel):
    reacted: bool
    reaction_type: Optional[str] = None


class RecentReactor(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    reaction_type: str
    created_at: datetime
    user: UserSummary


class PostReactionsSummary(BaseModel):
    counts: Dict[str, int]
    total: int
    recent: List[RecentReactor]


class CommentReactionsSummary(BaseModel):
    counts: Dict[str, int]
    total: int
