# peekhour/routers/moderation.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from peekhour.core.config import settings
from peekhour.core.database import get_db
from peekhour.core.dependencies import get_current_admin, get_current_user
from peekhour.models.user import User
from peekhour.schemas.common import ApiResponse
from peekhour.schemas.moderation import (
    BanCreate,
    ModerationLogListData,
    ReportCreate,
    ReportListData,
    ReportResponse,
    ReportReview,
    UserBanResponse,
)
from peekhour.services.moderation import ModerationService

router = APIRouter(
    prefix="/api/moderation",
    tags=["Moderation"],
    responses={404: {"description": "Not found"}},
)


@router.post("/reports", response_model=ApiResponse[ReportResponse], status_code=201)
def create_report(
    report_in: ReportCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Report a post, comment or user"""
    service = ModerationService(db)
    report = service.create_report(report_in, current_user.id)
    return {"message": "Report submitted successfully", "data": report}


# ==================== Admin-Only Endpoints ====================


@router.get("/reports", response_model=ApiResponse[ReportListData])
def get_reports(
    page: int = Query(1, ge=1),
    size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    status: Optional[str] = Query(None, pattern="^(pending|resolved|dismissed)$"),
    target_type: Optional[str] = Query(None, pattern="^(post|comment|user)$"),
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    service = ModerationService(db)
    reports, pagination = service.get_reports(page, size, status, target_type)
    return {"data": {"reports": reports, "pagination": pagination}}


@router.post("/reports/{report_id}/review", response_model=ApiResponse[ReportResponse])
def review_report(
    report_id: int,
    review_in: ReportReview,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    """
    Close a report by dismissing it, removing the content or banning its author.
    Admin only.
    """
    service = ModerationService(db)
    report = service.review_report(
        report_id, review_in.action, current_admin.id, review_in.notes
    )
    return {"message": "Report reviewed successfully", "data": report}


@router.post("/users/{user_id}/ban", response_model=ApiResponse[UserBanResponse])
def ban_user(
    user_id: int,
    ban_in: BanCreate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    service = ModerationService(db)
    ban = service.ban_user(user_id, ban_in.reason, current_admin.id, ban_in.duration)
    return {"message": "User banned successfully", "data": ban}


@router.post("/users/{user_id}/unban", response_model=ApiResponse)
def unban_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    service = ModerationService(db)
    service.unban_user(user_id, current_admin.id)
    return {"message": "User unbanned successfully"}


@router.get("/logs", response_model=ApiResponse[ModerationLogListData])
def get_moderation_logs(
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=settings.max_page_size),
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    service = ModerationService(db)
    logs, pagination = service.get_logs(page, size)
    return {"data": {"logs": logs, "pagination": pagination}}
