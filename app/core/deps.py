"""
FastAPI dependencies for authentication and authorization.

Access levels:
- anonymous: no dependency (or get_optional_user)
- logged in: get_current_user
- admin: get_admin_user
- self or admin: get_user_or_admin, keyed on the {username} path parameter
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session
from typing import Optional

from app.core.database import get_db
from app.core.security import decode_token
from app.models.user import User

# Missing or invalid tokens mean "anonymous", not an error
security = HTTPBearer(auto_error=False)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """
    Extract the user from a Bearer token if one was provided.

    Returns None for anonymous requests, invalid or expired tokens, and
    tokens whose user no longer exists.
    """
    if not credentials:
        return None

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        return None

    username = payload.get("sub")
    if username is None:
        return None

    return db.get(User, username)


async def get_current_user(
    user: Optional[User] = Depends(get_optional_user)
) -> User:
    """
    Require a logged-in user.

    Raises:
        HTTPException 401: If no valid token was provided
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


async def get_admin_user(
    user: User = Depends(get_current_user)
) -> User:
    """
    Require a logged-in admin.

    Raises:
        HTTPException 401: Not logged in
        HTTPException 403: Logged in but not an admin
    """
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )

    return user


async def get_user_or_admin(
    username: str,
    user: User = Depends(get_current_user)
) -> User:
    """
    Require the user named in the URL, or an admin.

    Raises:
        HTTPException 401: Not logged in
        HTTPException 403: Logged in as a different non-admin user
    """
    if user.username != username and not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to access this user"
        )

    return user
