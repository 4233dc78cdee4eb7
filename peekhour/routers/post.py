# peekhour/routers/post.py
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from peekhour.core.database import get_db
from peekhour.core.dependencies import get_current_user, get_optional_user
from peekhour.models.user import User
from peekhour.schemas.common import ApiResponse
from peekhour.schemas.post import PostCreate, PostResponse, PostUpdate
from peekhour.services.post import PostService

router = APIRouter(
    prefix="/api/posts",
    tags=["Posts"],
    responses={404: {"description": "Not found"}},
)


@router.post("", response_model=ApiResponse[PostResponse], status_code=201)
def create_post(
    post_in: PostCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Create a post, optionally inside a department.
    Posts in departments that require approval stay hidden until approved.
    """
    service = PostService(db)
    post = service.create_post(post_in, current_user)
    return {"message": "Post created successfully", "data": post}


@router.get("/{post_id}", response_model=ApiResponse[PostResponse])
def get_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    service = PostService(db)
    user_id = current_user.id if current_user else None
    return {"data": service.get_post(post_id, user_id)}


@router.put("/{post_id}", response_model=ApiResponse[PostResponse])
def update_post(
    post_id: int,
    post_in: PostUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update a post. Only the author can edit."""
    service = PostService(db)
    post = service.update_post(post_id, post_in, current_user.id)
    return {"message": "Post updated successfully", "data": post}


@router.delete("/{post_id}", response_model=ApiResponse)
def delete_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = PostService(db)
    service.delete_post(post_id, current_user.id)
    return {"message": "Post deleted successfully"}
