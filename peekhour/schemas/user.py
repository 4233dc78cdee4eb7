# peekhour/schemas/user.py
from typing import Optional

from pydantic import BaseModel, ConfigDict


class UserSummary(BaseModel):
    """Minimal author info embedded in posts, comments and lists"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    name: str
    avatar: Optional[str] = None
