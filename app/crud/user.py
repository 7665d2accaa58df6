"""
CRUD operations for users, including password authentication.
"""

import logging
from typing import Any, Dict, List, Mapping

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import run_query
from app.core.exceptions import BadRequestError, NotFoundError, UnauthorizedError
from app.core.security import get_password_hash, verify_password
from app.core.sql import sql_for_partial_update
from app.schemas.user import UserRegisterRequest

logger = logging.getLogger(__name__)

USER_COLUMNS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "isAdmin": "is_admin",
}

_RETURNING = 'username, first_name AS "firstName", last_name AS "lastName", email, is_admin AS "isAdmin"'


def _shape(row: Mapping[str, Any]) -> Dict[str, Any]:
    user = dict(row)
    # SQLite hands booleans back as 0/1
    user["isAdmin"] = bool(user["isAdmin"])
    return user


def authenticate(db: Session, username: str, password: str) -> Dict[str, Any]:
    """
    Check a username/password pair.

    Returns the user (without password) on success.

    Raises:
        UnauthorizedError: If the user is missing or the password is wrong
    """
    row = run_query(
        db,
        f"""SELECT {_RETURNING}, password
            FROM users
            WHERE username = $1""",
        [username]
    ).mappings().first()

    if row and verify_password(password, row["password"]):
        user = _shape(row)
        del user["password"]
        return user

    logger.warning(f"Failed login for {username}")
    raise UnauthorizedError("Invalid username/password")


def register(db: Session, user_data: UserRegisterRequest, is_admin: bool = False) -> Dict[str, Any]:
    """
    Create a user with a bcrypt-hashed password.

    Raises:
        BadRequestError: If the username is taken
    """
    duplicate = run_query(
        db,
        "SELECT username FROM users WHERE username = $1",
        [user_data.username]
    ).first()
    if duplicate:
        raise BadRequestError(f"Duplicate username: {user_data.username}")

    try:
        result = run_query(
            db,
            f"""INSERT INTO users (username, password, first_name, last_name, email, is_admin)
                VALUES ($1, $2, $3, $4, $5, $6)
                RETURNING {_RETURNING}""",
            [
                user_data.username,
                get_password_hash(user_data.password),
                user_data.first_name,
                user_data.last_name,
                user_data.email,
                is_admin,
            ]
        )
        user = _shape(result.mappings().one())
        db.commit()
    except IntegrityError as e:
        # a concurrent registration can slip past the check above
        db.rollback()
        logger.error(f"Error registering user {user_data.username}: {e.orig}")
        raise BadRequestError(f"Duplicate username: {user_data.username}")

    logger.info(f"Registered user {user['username']} (admin: {user['isAdmin']})")
    return user


def find_all(db: Session) -> List[Dict[str, Any]]:
    """List users ordered by username."""
    result = run_query(
        db,
        f"""SELECT {_RETURNING}
            FROM users
            ORDER BY username"""
    )
    return [_shape(row) for row in result.mappings()]


def get(db: Session, username: str) -> Dict[str, Any]:
    """
    Raises:
        NotFoundError: If no such user
    """
    row = run_query(
        db,
        f"""SELECT {_RETURNING}
            FROM users
            WHERE username = $1""",
        [username]
    ).mappings().first()

    if not row:
        raise NotFoundError(f"No user: {username}")

    return _shape(row)


def update(db: Session, username: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a user.

    Data can include: { firstName, lastName, password, email, isAdmin }
    A new password is hashed before it is stored.

    Raises:
        BadRequestError: If `data` is empty or violates a table constraint
        NotFoundError: If no such user
    """
    data = dict(data)
    if "password" in data:
        data["password"] = get_password_hash(data["password"])

    set_cols, values = sql_for_partial_update(data, USER_COLUMNS)
    username_idx = f"${len(values) + 1}"

    try:
        row = run_query(
            db,
            f"""UPDATE users
                SET {set_cols}
                WHERE username = {username_idx}
                RETURNING {_RETURNING}""",
            [*values, username]
        ).mappings().first()
        user = _shape(row) if row else None
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Error updating user {username}: {e.orig}")
        raise BadRequestError(f"Invalid user data: {', '.join(data)}")

    if not user:
        raise NotFoundError(f"No user: {username}")

    logger.info(f"Updated user {username}: {', '.join(data)}")
    return user


def remove(db: Session, username: str) -> None:
    """
    Raises:
        NotFoundError: If no such user
    """
    row = run_query(
        db,
        "DELETE FROM users WHERE username = $1 RETURNING username",
        [username]
    ).first()
    db.commit()

    if not row:
        raise NotFoundError(f"No user: {username}")

    logger.info(f"Deleted user {username}")
