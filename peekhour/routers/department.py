# peekhour/routers/department.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from peekhour.core.config import settings
from peekhour.core.database import get_db
from peekhour.core.dependencies import get_current_user, get_optional_user
from peekhour.models.user import User
from peekhour.schemas.common import ApiResponse
from peekhour.schemas.department import (
    DepartmentCreate,
    DepartmentMemberResponse,
    DepartmentResponse,
)
from peekhour.schemas.post import PostListData
from peekhour.services.department import DepartmentService
from peekhour.services.post import PostService

router = APIRouter(
    prefix="/api/departments",
    tags=["Departments"],
    responses={404: {"description": "Not found"}},
)


@router.post("", response_model=ApiResponse[DepartmentResponse], status_code=201)
def create_department(
    department_in: DepartmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Create a department.
    The creator becomes its admin and first member.
    """
    service = DepartmentService(db)
    department = service.create_department(department_in, current_user.id)
    return {"message": "Department created successfully", "data": department}


@router.get("/{department_id}", response_model=ApiResponse[DepartmentResponse])
def get_department(
    department_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    service = DepartmentService(db)
    user_id = current_user.id if current_user else None
    return {"data": service.get_department(department_id, user_id)}


@router.post(
    "/{department_id}/join", response_model=ApiResponse[DepartmentMemberResponse]
)
def join_department(
    department_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = DepartmentService(db)
    membership = service.join_department(department_id, current_user.id)
    return {"message": "Joined department successfully", "data": membership}


@router.post("/{department_id}/leave", response_model=ApiResponse)
def leave_department(
    department_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = DepartmentService(db)
    service.leave_department(department_id, current_user.id)
    return {"message": "Left department successfully"}


@router.get("/{department_id}/posts", response_model=ApiResponse[PostListData])
def list_department_posts(
    department_id: int,
    page: int = Query(1, ge=1),
    size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """Visible posts of a department, newest first"""
    service = PostService(db)
    user_id = current_user.id if current_user else None
    posts, pagination = service.get_department_posts(
        department_id, page, size, user_id
    )
    return {"data": {"posts": posts, "pagination": pagination}}
