"""
FastAPI dependencies for authentication and authorization.

Reading endpoints are public; mutations depend on one of the guards below.
The user is taken from the JWT claims, so no database round trip is needed to
authorize a request.
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import BaseModel

from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.core.security import decode_token

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme (Authorization: Bearer <token>).
# auto_error=False so a missing header surfaces as our 401, not FastAPI's 403.
security = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    """Claims of the authenticated caller."""
    username: str
    is_admin: bool = False


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[CurrentUser]:
    """
    Return the caller from a valid Bearer token, or None.

    An invalid or expired token is treated like no token at all.
    """
    if not credentials:
        return None

    try:
        payload = decode_token(credentials.credentials)
    except JWTError as e:
        logger.warning(f"Rejected token: {e}")
        return None

    username = payload.get("sub")
    if username is None:
        return None

    return CurrentUser(username=username, is_admin=payload.get("is_admin", False))


def get_current_user(user: Optional[CurrentUser] = Depends(get_optional_user)) -> CurrentUser:
    """
    Require a logged-in caller.

    Raises:
        UnauthorizedError: If no valid token was provided
    """
    if user is None:
        raise UnauthorizedError()
    return user


def get_admin_user(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """
    Require a logged-in admin.

    Raises:
        UnauthorizedError: If no valid token was provided
        ForbiddenError: If the caller is not an admin
    """
    if not user.is_admin:
        raise ForbiddenError("Admin privileges required")
    return user


def ensure_correct_user_or_admin(user: CurrentUser, username: str) -> None:
    """
    Allow admins, or the user named by `username` acting on their own account.

    Raises:
        ForbiddenError: For any other caller
    """
    if not (user.is_admin or user.username == username):
        raise ForbiddenError()
