# peekhour/services/moderation.py
import logging
import math
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from peekhour.core.decorator import db_exception
from peekhour.models.comment import Comment
from peekhour.models.moderation_log import ModerationLog
from peekhour.models.post import Post
from peekhour.models.report import Report
from peekhour.models.user import User
from peekhour.models.user_ban import UserBan
from peekhour.schemas.moderation import ReportCreate

logger = logging.getLogger(__name__)

DEFAULT_BAN_REASON = "Violated community guidelines"

# Review action -> resulting report status
REPORT_OUTCOMES = {
    "dismiss": "dismissed",
    "remove_content": "resolved",
    "ban_user": "resolved",
}


def get_active_ban(db: Session, user_id: int) -> Optional[UserBan]:
    """Current ban of a user, ignoring bans whose expiry has passed"""
    return (
        db.query(UserBan)
        .filter(
            UserBan.user_id == user_id,
            UserBan.is_active == True,
            or_(
                UserBan.expires_at.is_(None),
                UserBan.expires_at > datetime.now(timezone.utc),
            ),
        )
        .first()
    )


class ModerationService:
    """Site-wide reports, bans and the moderation audit log."""

    def __init__(self, db: Session):
        self.db = db

    def _content_owner(self, target_type: str, target_id: int) -> Optional[int]:
        if target_type == "user":
            user = self.db.query(User).filter(User.id == target_id).first()
            return user.id if user else None
        model = Post if target_type == "post" else Comment
        target = self.db.query(model).filter(model.id == target_id).first()
        return target.user_id if target else None

    def _log(self, moderator_id: int, action: str, target_type: str, target_id: int, reason: str):
        self.db.add(
            ModerationLog(
                moderator_id=moderator_id,
                action=action,
                target_type=target_type,
                target_id=target_id,
                reason=reason,
            )
        )

    # ==================== Reports ====================

    @db_exception
    def create_report(self, report_in: ReportCreate, reporter_id: int) -> Report:
        if self._content_owner(report_in.target_type, report_in.target_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Reported content not found",
            )

        duplicate = (
            self.db.query(Report)
            .filter(
                Report.reporter_id == reporter_id,
                Report.target_type == report_in.target_type,
                Report.target_id == report_in.target_id,
                Report.status == "pending",
            )
            .first()
        )
        if duplicate:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You have already reported this content",
            )

        report = Report(**report_in.model_dump(), reporter_id=reporter_id)
        self.db.add(report)
        self.db.commit()
        self.db.refresh(report)
        return report

    def get_reports(
        self,
        page: int = 1,
        size: int = 20,
        report_status: Optional[str] = None,
        target_type: Optional[str] = None,
    ) -> Tuple[List[Report], dict]:
        query = self.db.query(Report)
        if report_status:
            query = query.filter(Report.status == report_status)
        if target_type:
            query = query.filter(Report.target_type == target_type)

        total = query.count()

        offset = (page - 1) * size
        reports = (
            query.order_by(Report.created_at.desc(), Report.id.desc())
            .offset(offset)
            .limit(size)
            .all()
        )

        pagination = {
            "total": total,
            "page": page,
            "size": size,
            "total_pages": math.ceil(total / size),
        }

        return reports, pagination

    def review_report(
        self, report_id: int, action: str, admin_id: int, notes: Optional[str] = None
    ) -> Report:
        """Close a pending report and apply its action.

        The report update, the content removal or ban, and the audit log row
        commit as one unit.
        """
        report = (
            self.db.query(Report)
            .filter(Report.id == report_id, Report.status == "pending")
            .first()
        )
        if not report:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Report not found"
            )

        now = datetime.now(timezone.utc)
        try:
            report.status = REPORT_OUTCOMES[action]
            report.action_taken = action
            report.notes = notes
            report.reviewed_by = admin_id
            report.reviewed_at = now

            if action == "remove_content" and report.target_type == "post":
                self.db.query(Post).filter(Post.id == report.target_id).update(
                    {Post.is_active: False, Post.deleted_at: now},
                    synchronize_session=False,
                )
            elif action == "remove_content" and report.target_type == "comment":
                self.db.query(Comment).filter(Comment.id == report.target_id).update(
                    {Comment.is_active: False}, synchronize_session=False
                )
            elif action == "ban_user":
                offender_id = self._content_owner(report.target_type, report.target_id)
                if offender_id and not get_active_ban(self.db, offender_id):
                    self.db.add(
                        UserBan(
                            user_id=offender_id,
                            banned_by=admin_id,
                            reason=notes or DEFAULT_BAN_REASON,
                        )
                    )

            self._log(
                admin_id,
                action,
                report.target_type,
                report.target_id,
                notes or "Report review",
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.error(f"Failed to review report {report_id}", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to review report",
            )

        self.db.refresh(report)
        logger.info(f"Report {report_id} reviewed by {admin_id}: {action}")
        return report

    # ==================== Bans ====================

    @db_exception
    def ban_user(
        self, user_id: int, reason: str, admin_id: int, duration: Optional[int] = None
    ) -> UserBan:
        """Ban a user, permanently or for ``duration`` days"""
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
            )
        if get_active_ban(self.db, user_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User is already banned",
            )

        expires_at = (
            datetime.now(timezone.utc) + timedelta(days=duration) if duration else None
        )
        ban = UserBan(
            user_id=user_id, banned_by=admin_id, reason=reason, expires_at=expires_at
        )
        self.db.add(ban)
        self._log(admin_id, "ban_user", "user", user_id, reason)
        self.db.commit()
        self.db.refresh(ban)

        logger.info(f"User {user_id} banned by {admin_id} (duration={duration})")
        return ban

    @db_exception
    def unban_user(self, user_id: int, admin_id: int) -> int:
        lifted = (
            self.db.query(UserBan)
            .filter(UserBan.user_id == user_id, UserBan.is_active == True)
            .update({UserBan.is_active: False}, synchronize_session=False)
        )
        if not lifted:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User is not banned",
            )

        self._log(admin_id, "unban_user", "user", user_id, "Ban lifted")
        self.db.commit()
        logger.info(f"User {user_id} unbanned by {admin_id}")
        return lifted

    def get_logs(self, page: int = 1, size: int = 50) -> Tuple[List[ModerationLog], dict]:
        query = self.db.query(ModerationLog)

        total = query.count()

        offset = (page - 1) * size
        logs = (
            query.order_by(ModerationLog.created_at.desc(), ModerationLog.id.desc())
            .offset(offset)
            .limit(size)
            .all()
        )

        pagination = {
            "total": total,
            "page": page,
            "size": size,
            "total_pages": math.ceil(total / size),
        }

        return logs, pagination
