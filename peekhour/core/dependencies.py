import logging
from typing import Optional

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from peekhour.core.database import get_db
from peekhour.core.security import jwt_manager
from peekhour.models.user import User
from peekhour.services.moderation import get_active_ban

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _user_from_payload(payload: dict, db: Session) -> Optional[User]:
    user_id = payload.get("id")
    if user_id is None:
        return None
    return db.query(User).filter(User.id == user_id).first()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(security),
    db: Session = Depends(get_db),
) -> User:
    """
    Dependency that requires a valid Bearer token and returns the active user.
    Raises 401 Unauthorized if the token is missing, invalid, or the user is not found.
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied. No token provided.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = jwt_manager.verify_token(credentials.credentials, "access")
    user = _user_from_payload(payload, db)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Account is disabled"
        )

    if get_active_ban(db, user.id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your account has been banned",
        )

    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """
    Dependency that returns a user if a valid token is provided, or None otherwise.
    Invalid or expired tokens are treated as anonymous access.
    """
    if not credentials:
        return None

    try:
        payload = jwt_manager.verify_token(credentials.credentials, "access")
    except HTTPException:
        return None

    user = _user_from_payload(payload, db)
    if not user or not user.is_active:
        return None

    return user


async def get_current_admin(
    current_user: User = Depends(get_current_user),
) -> User:
    """Site administrator (report review, bans, moderation logs)."""
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required"
        )
    return current_user
