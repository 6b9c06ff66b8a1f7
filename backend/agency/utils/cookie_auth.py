"""
JWT session cookie handling for the login endpoint.
"""
from fastapi import Response
import logging

from agency.config import settings
from agency.auth import create_access_token

logger = logging.getLogger(__name__)

COOKIE_NAME = "access_token"
COOKIE_MAX_AGE = settings.ACCESS_TOKEN_EXPIRE_HOURS * 3600


def set_auth_cookie(response: Response, email: str) -> str:
    """
    Create a JWT for `email` and set it as httpOnly cookie.

    Returns the token as well so API clients can send it as bearer header.
    """
    access_token = create_access_token(data={"sub": email})

    response.set_cookie(
        key=COOKIE_NAME,
        value=access_token,
        httponly=True,
        secure=settings.ENVIRONMENT == "production",
        samesite="lax",
        max_age=COOKIE_MAX_AGE,
        path="/",
    )
    logger.info("Auth cookie set for user: %s", email)
    return access_token


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(key=COOKIE_NAME, path="/")
