"""
CRUD operations for User model.
"""

import logging
from typing import Any, List, Mapping
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import DuplicateError, NotFoundError, UnauthorizedError
from app.core.security import get_password_hash, verify_password
from app.core.sql import compile_partial_update
from app.models.user import User
from app.schemas.user import UserRegisterRequest

logger = logging.getLogger(__name__)

# Passwords are hashed before compiling, so "password" lands in hashed_password
USER_COLUMNS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "isAdmin": "is_admin",
    "password": "hashed_password",
}

UPDATABLE_FIELDS = ("firstName", "lastName", "password", "email", "isAdmin")

UPDATE_SQL = "UPDATE users SET {clause} WHERE username = ${next}"


def authenticate(db: Session, username: str, password: str) -> User:
    """
    Check a username/password pair.

    Raises:
        UnauthorizedError: If the user does not exist or the password is wrong
    """
    user = db.get(User, username)
    if user is None or not verify_password(password, user.hashed_password):
        raise UnauthorizedError("Invalid username/password")
    return user


def register(db: Session, user_data: UserRegisterRequest, is_admin: bool = False) -> User:
    """
    Create a user with a hashed password.

    Args:
        db: Database session
        user_data: Validated registration data
        is_admin: Whether the new user is an admin

    Raises:
        DuplicateError: If the username is taken
    """
    if db.get(User, user_data.username) is not None:
        raise DuplicateError(f"Duplicate username: {user_data.username}")

    user = User(
        username=user_data.username,
        hashed_password=get_password_hash(user_data.password),
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        email=user_data.email,
        is_admin=is_admin,
    )
    db.add(user)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError(f"Duplicate username: {user_data.username}")

    db.refresh(user)
    return user


def get_all(db: Session) -> List[User]:
    """Return all users ordered by username."""
    return db.query(User).order_by(User.username).all()


def get_by_username(db: Session, username: str) -> User:
    """
    Retrieve a user by username.

    Raises:
        NotFoundError: If no such user
    """
    user = db.get(User, username)
    if user is None:
        raise NotFoundError(f"No user: {username}")
    return user


def update(db: Session, username: str, payload: Mapping[str, Any]) -> User:
    """
    Partially update a user.

    Args:
        db: Database session
        username: User to update
        payload: Any of firstName, lastName, password, email, isAdmin

    Raises:
        EmptyPayloadError: If payload is empty
        UnknownFieldError: If payload names any other field
        NotFoundError: If no such user
    """
    if payload.get("password") is not None:
        payload = {**payload, "password": get_password_hash(payload["password"])}

    clause = compile_partial_update(payload, USER_COLUMNS, allowed=UPDATABLE_FIELDS)
    result = db.execute(clause.to_statement(UPDATE_SQL, username))

    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError(f"No user: {username}")

    db.commit()
    return get_by_username(db, username)


def delete(db: Session, username: str) -> int:
    """
    Delete a user and, through the cascade, their applications in one commit.

    Returns:
        Number of applications withdrawn

    Raises:
        NotFoundError: If no such user
    """
    user = get_by_username(db, username)
    withdrawn = len(user.applications)
    db.delete(user)
    db.commit()
    return withdrawn
