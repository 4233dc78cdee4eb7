# peekhour/services/department.py
import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from peekhour.core.decorator import db_exception
from peekhour.models.department import Department
from peekhour.models.department_member import DepartmentMember
from peekhour.models.department_moderator import DepartmentModerator
from peekhour.schemas.department import DepartmentCreate, DepartmentSettingsUpdate

logger = logging.getLogger(__name__)


# ==================== Access helpers ====================


def get_department_or_404(db: Session, department_id: int) -> Department:
    department = db.query(Department).filter(Department.id == department_id).first()
    if not department:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Department not found"
        )
    return department


def get_moderator(
    db: Session, department_id: int, user_id: int
) -> Optional[DepartmentModerator]:
    """Read the moderator row straight from the database.

    Permissions are never cached, so a change made by the department admin
    applies to the very next request.
    """
    return (
        db.query(DepartmentModerator)
        .filter(
            DepartmentModerator.department_id == department_id,
            DepartmentModerator.user_id == user_id,
        )
        .first()
    )


def get_membership(
    db: Session, department_id: int, user_id: int
) -> Optional[DepartmentMember]:
    return (
        db.query(DepartmentMember)
        .filter(
            DepartmentMember.department_id == department_id,
            DepartmentMember.user_id == user_id,
        )
        .first()
    )


def require_department_admin(department: Department, user_id: int, detail: str) -> None:
    if department.created_by != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def require_permission(
    db: Session,
    department: Department,
    user_id: int,
    permission: str,
    not_moderator_detail: str,
    denied_detail: str,
) -> None:
    """Allow the department creator, or a moderator holding ``permission``.

    ``permission`` is the moderator column name, e.g. ``can_approve_post``.
    """
    if department.created_by == user_id:
        return

    moderator = get_moderator(db, department.id, user_id)
    if not moderator:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail=not_moderator_detail
        )
    if not getattr(moderator, permission):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=denied_detail)


# ==================== Service ====================


class DepartmentService:
    def __init__(self, db: Session):
        self.db = db

    def _annotate(self, department: Department, user_id: Optional[int]) -> Department:
        department.members_count = (
            self.db.query(DepartmentMember)
            .filter(DepartmentMember.department_id == department.id)
            .count()
        )
        if user_id:
            membership = get_membership(self.db, department.id, user_id)
            department.is_member = membership is not None
            department.user_role = membership.role if membership else None
        return department

    @db_exception
    def create_department(
        self, department_in: DepartmentCreate, creator_id: int
    ) -> Department:
        """Create a department; the creator joins it as its admin"""
        department = Department(**department_in.model_dump(), created_by=creator_id)
        self.db.add(department)
        self.db.flush()  # Get the ID

        self.db.add(
            DepartmentMember(
                department_id=department.id, user_id=creator_id, role="admin"
            )
        )

        self.db.commit()
        self.db.refresh(department)
        logger.info(f"Department {department.id} created by user {creator_id}")
        return self._annotate(department, creator_id)

    def get_department(
        self, department_id: int, user_id: Optional[int] = None
    ) -> Department:
        department = get_department_or_404(self.db, department_id)
        return self._annotate(department, user_id)

    @db_exception
    def join_department(self, department_id: int, user_id: int) -> DepartmentMember:
        department = get_department_or_404(self.db, department_id)

        if not department.is_active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Department is not active",
            )
        if department.created_by == user_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You are the creator of this department",
            )
        if get_membership(self.db, department_id, user_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Already a member of this department",
            )

        membership = DepartmentMember(
            department_id=department_id, user_id=user_id, role="member"
        )
        self.db.add(membership)
        self.db.commit()
        self.db.refresh(membership)
        return membership

    @db_exception
    def leave_department(self, department_id: int, user_id: int) -> bool:
        get_department_or_404(self.db, department_id)

        membership = get_membership(self.db, department_id, user_id)
        if not membership:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Not a member of this department",
            )

        if membership.role == "admin":
            admins = (
                self.db.query(DepartmentMember)
                .filter(
                    DepartmentMember.department_id == department_id,
                    DepartmentMember.role == "admin",
                )
                .count()
            )
            if admins <= 1:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="The last admin cannot leave the department",
                )

        # Leaving also drops any moderator role held in the department
        moderator = get_moderator(self.db, department_id, user_id)
        if moderator:
            self.db.delete(moderator)
        self.db.delete(membership)
        self.db.commit()
        return True

    @db_exception
    def update_settings(
        self,
        department_id: int,
        settings_in: DepartmentSettingsUpdate,
        user_id: int,
    ) -> Department:
        """Update cover image, rules and approval requirement.

        The creator may change everything. A moderator with ``canEditRules``
        may change the rules only.
        """
        department = get_department_or_404(self.db, department_id)
        updates = settings_in.model_dump(exclude_unset=True)

        if department.created_by != user_id:
            moderator = get_moderator(self.db, department_id, user_id)
            rules_only = set(updates) <= {"rules"}
            if not (moderator and moderator.can_edit_rules and rules_only):
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Only department admin can update settings",
                )

        if not updates:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No updates provided",
            )

        for field, value in updates.items():
            setattr(department, field, value)

        self.db.commit()
        self.db.refresh(department)
        logger.info(
            f"Department {department_id} settings updated by user {user_id}: "
            f"{sorted(updates)}"
        )
        return self._annotate(department, user_id)
