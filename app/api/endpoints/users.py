"""
User management endpoints.

Admins manage every account; a logged-in user may read, update and delete
their own account. Only admins can grant or revoke admin rights.
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import CurrentUser, ensure_correct_user_or_admin, get_admin_user, get_current_user
from app.core.exceptions import ForbiddenError
from app.core.security import create_access_token
from app.crud import user as user_crud
from app.schemas.user import (
    TokenResponse,
    UserCreateRequest,
    UserCreateResponse,
    UserDeleteResponse,
    UserEnvelope,
    UserListEnvelope,
    UserUpdateRequest,
)

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=201, response_model=UserCreateResponse)
def create_user(
    request: UserCreateRequest,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(get_admin_user)
):
    """
    Add a user. Admin only.

    Unlike /auth/register this can create other admins. Returns the new user
    and a token for them.
    """
    user = user_crud.register(db, request, is_admin=request.is_admin)
    logger.info(f"User {user['username']} created by {admin.username}")

    return {
        "user": user,
        "token": TokenResponse(access_token=create_access_token(user["username"], user["isAdmin"])),
    }


@router.get("/", response_model=UserListEnvelope)
def list_users(
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(get_admin_user)
):
    """List all users. Admin only."""
    return {"users": user_crud.find_all(db)}


@router.get("/{username}", response_model=UserEnvelope)
def get_user(
    username: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Retrieve a user. Admin or the user themselves."""
    ensure_correct_user_or_admin(current_user, username)
    return {"user": user_crud.get(db, username)}


@router.patch("/{username}", response_model=UserEnvelope)
def update_user(
    username: str,
    request: UserUpdateRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """
    Partially update a user. Admin or the user themselves.

    Fields can be: { firstName, lastName, password, email, isAdmin }.
    Only admins may change isAdmin.
    """
    ensure_correct_user_or_admin(current_user, username)

    data = request.model_dump(exclude_unset=True, by_alias=True)
    if "isAdmin" in data and not current_user.is_admin:
        raise ForbiddenError("Only admins can change admin rights")

    return {"user": user_crud.update(db, username, data)}


@router.delete("/{username}", response_model=UserDeleteResponse)
def delete_user(
    username: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Delete a user. Admin or the user themselves."""
    ensure_correct_user_or_admin(current_user, username)
    user_crud.remove(db, username)
    return {"deleted": username}
