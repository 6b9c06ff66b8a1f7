from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from agency.db import get_db
from agency.auth import decode_access_token
from agency.models import User
from agency.utils.cookie_auth import COOKIE_NAME
from typing import Optional

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the caller from the bearer header, falling back to the session cookie"""
    token = credentials.credentials if credentials else request.cookies.get(COOKIE_NAME)
    if not token:
        raise _unauthorized("Not authenticated")

    payload = decode_access_token(token) or {}
    email = payload.get("sub")
    if not email:
        raise _unauthorized("Invalid authentication credentials")

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        raise _unauthorized("User not found")

    # Picked up by the request log line
    request.state.user_id = str(user.id)
    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user")
    return current_user
