# peekhour/routers/comment.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from peekhour.core.config import settings
from peekhour.core.database import get_db
from peekhour.core.dependencies import get_current_user, get_optional_user
from peekhour.models.user import User
from peekhour.schemas.comment import (
    CommentCreate,
    CommentListData,
    CommentResponse,
    CommentUpdate,
    ThreadCommentResponse,
)
from peekhour.schemas.common import ApiResponse
from peekhour.services.comment import CommentService

router = APIRouter(
    prefix="/api",
    tags=["Comments"],
    responses={404: {"description": "Not found"}},
)


# ==================== Post Comments ====================


@router.post(
    "/posts/{post_id}/comments",
    response_model=ApiResponse[CommentResponse],
    status_code=201,
)
def add_comment(
    post_id: int,
    comment_in: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Add a top-level comment to a post"""
    service = CommentService(db)
    comment = service.add_comment(post_id, comment_in.content, current_user)
    return {"message": "Comment added successfully", "data": comment}


@router.get("/posts/{post_id}/comments", response_model=ApiResponse[CommentListData])
def list_comments(
    post_id: int,
    page: int = Query(1, ge=1),
    size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """
    Get top-level comments of a post, oldest first.
    Available to all users; signed-in users also get their own reaction.
    """
    service = CommentService(db)
    user_id = current_user.id if current_user else None
    comments, pagination = service.get_comments(post_id, page, size, user_id)
    return {"data": {"comments": comments, "pagination": pagination}}


@router.post(
    "/posts/{post_id}/comments/{parent_comment_id}/reply",
    response_model=ApiResponse[CommentResponse],
    status_code=201,
)
def create_reply(
    post_id: int,
    parent_comment_id: int,
    comment_in: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Reply to a comment.
    Replies nest one level below their parent, up to the configured depth.
    """
    service = CommentService(db)
    reply = service.create_reply(
        post_id, parent_comment_id, comment_in.content, current_user
    )
    return {"message": "Reply created successfully", "data": reply}


# ==================== Comment Endpoints ====================


@router.get(
    "/comments/{comment_id}/replies",
    response_model=ApiResponse[List[CommentResponse]],
)
def get_replies(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """Get the direct replies of a comment"""
    service = CommentService(db)
    user_id = current_user.id if current_user else None
    return {"data": service.get_replies(comment_id, user_id)}


@router.get(
    "/comments/{comment_id}/thread",
    response_model=ApiResponse[List[ThreadCommentResponse]],
)
def get_thread(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """
    Get a comment with all of its nested replies.
    Comments come in reading order, each with its level and path from the root.
    """
    service = CommentService(db)
    user_id = current_user.id if current_user else None
    return {"data": service.get_thread(comment_id, user_id)}


@router.put("/comments/{comment_id}", response_model=ApiResponse[CommentResponse])
def update_comment(
    comment_id: int,
    comment_in: CommentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Edit a comment. Only the author can edit."""
    service = CommentService(db)
    comment = service.update_comment(comment_id, comment_in.content, current_user.id)
    return {"message": "Comment updated successfully", "data": comment}


@router.delete("/comments/{comment_id}", response_model=ApiResponse)
def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Delete a comment and every reply beneath it.
    Only the author can delete.
    """
    service = CommentService(db)
    service.delete_comment(comment_id, current_user.id)
    return {"message": "Comment deleted successfully"}
