# peekhour/routers/reaction.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from peekhour.core.database import get_db
from peekhour.core.dependencies import get_current_user
from peekhour.models.user import User
from peekhour.schemas.common import ApiResponse
from peekhour.schemas.reaction import (
    CommentReactionsSummary,
    PostReactionsSummary,
    ReactionCreate,
    ReactionToggleResult,
)
from peekhour.services.reaction import ReactionService

router = APIRouter(prefix="/api/reactions", tags=["Reactions"])


@router.post(
    "/posts/{post_id}/react", response_model=ApiResponse[ReactionToggleResult]
)
def react_to_post(
    post_id: int,
    reaction_in: ReactionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Toggle a reaction on a post.
    Same type again removes it; a different type replaces it.
    """
    service = ReactionService(db)
    result, message = service.toggle_post_reaction(
        post_id, reaction_in.reaction_type, current_user
    )
    return {"message": message, "data": result}


@router.get(
    "/posts/{post_id}/reactions", response_model=ApiResponse[PostReactionsSummary]
)
def get_post_reactions(post_id: int, db: Session = Depends(get_db)):
    service = ReactionService(db)
    return {"data": service.get_post_reactions(post_id)}


@router.post(
    "/comments/{comment_id}/react", response_model=ApiResponse[ReactionToggleResult]
)
def react_to_comment(
    comment_id: int,
    reaction_in: ReactionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Toggle a reaction on a comment"""
    service = ReactionService(db)
    result, message = service.toggle_comment_reaction(
        comment_id, reaction_in.reaction_type, current_user
    )
    return {"message": message, "data": result}


@router.get(
    "/comments/{comment_id}/reactions",
    response_model=ApiResponse[CommentReactionsSummary],
)
def get_comment_reactions(comment_id: int, db: Session = Depends(get_db)):
    service = ReactionService(db)
    return {"data": service.get_comment_reactions(comment_id)}
