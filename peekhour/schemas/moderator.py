# peekhour/schemas/moderator.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from peekhour.schemas.user import UserSummary


class ModeratorPermissions(BaseModel):
    """Full permission set; missing keys fall back to the grant defaults.

    Keys are camelCase on the wire and map onto the moderator's boolean
    columns. Unknown keys are rejected.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    can_approve_post: bool = Field(True, alias="canApprovePost")
    can_delete_post: bool = Field(True, alias="canDeletePost")
    can_delete_comment: bool = Field(True, alias="canDeleteComment")
    can_ban_user: bool = Field(False, alias="canBanUser")
    can_create_event: bool = Field(True, alias="canCreateEvent")
    can_edit_rules: bool = Field(False, alias="canEditRules")


class ModeratorPermissionsPatch(BaseModel):
    """Partial permission update; only the keys sent are changed."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    can_approve_post: Optional[bool] = Field(None, alias="canApprovePost")
    can_delete_post: Optional[bool] = Field(None, alias="canDeletePost")
    can_delete_comment: Optional[bool] = Field(None, alias="canDeleteComment")
    can_ban_user: Optional[bool] = Field(None, alias="canBanUser")
    can_create_event: Optional[bool] = Field(None, alias="canCreateEvent")
    can_edit_rules: Optional[bool] = Field(None, alias="canEditRules")


class ModeratorCreate(BaseModel):
    user_id: int
    permissions: Optional[ModeratorPermissions] = None


class ModeratorPermissionsUpdate(BaseModel):
    permissions: ModeratorPermissionsPatch


class ModeratorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    department_id: int
    user_id: int
    assigned_by: Optional[int] = None
    assigned_at: datetime
    permissions: dict

    user: UserSummary
    assigner: Optional[UserSummary] = None
