# peekhour/routers/department_enhancements.py
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from peekhour.core.database import get_db
from peekhour.core.dependencies import get_current_user, get_optional_user
from peekhour.models.user import User
from peekhour.schemas.approval import PendingPostResponse, PostReview, PostSubmit
from peekhour.schemas.common import ApiResponse
from peekhour.schemas.department import DepartmentResponse, DepartmentSettingsUpdate
from peekhour.schemas.event import (
    EventAttendeesData,
    EventCreate,
    EventResponse,
    EventRSVP,
    RSVPResult,
)
from peekhour.schemas.moderator import (
    ModeratorCreate,
    ModeratorPermissions,
    ModeratorPermissionsUpdate,
    ModeratorResponse,
)
from peekhour.services.approval import PostApprovalService
from peekhour.services.department import DepartmentService
from peekhour.services.event import EventService
from peekhour.services.moderator import ModeratorService

router = APIRouter(
    prefix="/api/departments/enhancements",
    tags=["Department Tools"],
    responses={404: {"description": "Not found"}},
)


# ==================== Post Approval ====================
# NOTE: /posts/... routes are declared before /{department_id}/... ones so
# "posts" is never parsed as a department id


@router.post("/posts/submit", response_model=ApiResponse[PendingPostResponse])
def submit_post(
    submit_in: PostSubmit,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Submit one of your department posts for approval.
    The post stays hidden until a reviewer approves it.
    """
    service = PostApprovalService(db)
    pending = service.submit_post(
        submit_in.post_id, submit_in.department_id, current_user.id
    )
    return {"message": "Post submitted for approval", "data": pending}


@router.post("/posts/{post_id}/review", response_model=ApiResponse[PendingPostResponse])
def review_post(
    post_id: int,
    review_in: PostReview,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Approve or reject a pending post.
    Department admin, or a moderator allowed to approve posts.
    """
    service = PostApprovalService(db)
    pending = service.review_post(
        post_id, review_in.action, current_user.id, review_in.rejection_reason
    )
    return {"message": f"Post {review_in.action}d successfully", "data": pending}


@router.get(
    "/{department_id}/pending-posts",
    response_model=ApiResponse[List[PendingPostResponse]],
)
def get_pending_posts(
    department_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = PostApprovalService(db)
    return {"data": service.get_pending_posts(department_id, current_user.id)}


# ==================== Moderators ====================


@router.post(
    "/{department_id}/moderators",
    response_model=ApiResponse[ModeratorResponse],
    status_code=201,
)
def add_moderator(
    department_id: int,
    moderator_in: ModeratorCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Make a department member a moderator.
    Permissions not given fall back to the defaults. Department admin only.
    """
    service = ModeratorService(db)
    moderator = service.add_moderator(
        department_id,
        moderator_in.user_id,
        moderator_in.permissions or ModeratorPermissions(),
        current_user.id,
    )
    return {"message": "Moderator added successfully", "data": moderator}


@router.get(
    "/{department_id}/moderators",
    response_model=ApiResponse[List[ModeratorResponse]],
)
def get_moderators(
    department_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = ModeratorService(db)
    return {"data": service.get_moderators(department_id)}


@router.delete("/{department_id}/moderators/{moderator_id}", response_model=ApiResponse)
def remove_moderator(
    department_id: int,
    moderator_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Remove a moderator (by user id). Department admin only."""
    service = ModeratorService(db)
    service.remove_moderator(department_id, moderator_id, current_user.id)
    return {"message": "Moderator removed successfully"}


@router.patch(
    "/{department_id}/moderators/{moderator_id}/permissions",
    response_model=ApiResponse[ModeratorResponse],
)
def update_moderator_permissions(
    department_id: int,
    moderator_id: int,
    update_in: ModeratorPermissionsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Change some or all of a moderator's permissions. Department admin only."""
    service = ModeratorService(db)
    moderator = service.update_permissions(
        department_id, moderator_id, update_in.permissions, current_user.id
    )
    return {"message": "Permissions updated successfully", "data": moderator}


# ==================== Moderation Actions ====================


@router.delete("/{department_id}/posts/{post_id}", response_model=ApiResponse)
def moderator_remove_post(
    department_id: int,
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Hide a post from the department"""
    service = ModeratorService(db)
    service.remove_post(department_id, post_id, current_user.id)
    return {"message": "Post removed successfully"}


@router.delete("/{department_id}/comments/{comment_id}", response_model=ApiResponse)
def moderator_remove_comment(
    department_id: int,
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Hide a comment on a department post"""
    service = ModeratorService(db)
    service.remove_comment(department_id, comment_id, current_user.id)
    return {"message": "Comment removed successfully"}


# ==================== Settings ====================


@router.patch(
    "/{department_id}/settings", response_model=ApiResponse[DepartmentResponse]
)
def update_department_settings(
    department_id: int,
    settings_in: DepartmentSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Update cover image, rules or the approval requirement.
    Moderators allowed to edit rules may change the rules only.
    """
    service = DepartmentService(db)
    department = service.update_settings(department_id, settings_in, current_user.id)
    return {"message": "Department settings updated successfully", "data": department}


# ==================== Events ====================


@router.post(
    "/{department_id}/events",
    response_model=ApiResponse[EventResponse],
    status_code=201,
)
def create_event(
    department_id: int,
    event_in: EventCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = EventService(db)
    event = service.create_event(department_id, event_in, current_user.id)
    return {"message": "Event created successfully", "data": event}


@router.get(
    "/{department_id}/events", response_model=ApiResponse[List[EventResponse]]
)
def get_events(
    department_id: int,
    upcoming: bool = True,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    service = EventService(db)
    user_id = current_user.id if current_user else None
    return {"data": service.get_events(department_id, upcoming, user_id)}


@router.post("/events/{event_id}/rsvp", response_model=ApiResponse[RSVPResult])
def rsvp_event(
    event_id: int,
    rsvp_in: EventRSVP,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """RSVP to an event; ``not_going`` withdraws the RSVP"""
    service = EventService(db)
    result = service.rsvp(event_id, rsvp_in.status, current_user.id)
    return {"message": "RSVP updated successfully", "data": result}


@router.get(
    "/events/{event_id}/attendees", response_model=ApiResponse[EventAttendeesData]
)
def get_event_attendees(
    event_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    service = EventService(db)
    attendees = service.get_attendees(event_id)
    return {"data": {"attendees": attendees, "total": len(attendees)}}
