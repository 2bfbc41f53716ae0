"""
Authentication endpoints.

- POST /token: exchange username/password for a JWT
- POST /register: create a (non-admin) account and return a JWT
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import create_access_token
from app.crud import user as user_crud
from app.schemas.user import TokenRequest, TokenResponse, UserRegisterRequest

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


@router.post("/token", response_model=TokenResponse)
def login(request: TokenRequest, db: Session = Depends(get_db)):
    """
    Authenticate and return an access token.

    Raises 401 on an unknown username or wrong password.
    """
    user = user_crud.authenticate(db, request.username, request.password)
    logger.info(f"User logged in: {user.username}")

    return TokenResponse(access_token=create_access_token(user.username, user.is_admin))


@router.post("/register", status_code=201, response_model=TokenResponse)
def register(request: UserRegisterRequest, db: Session = Depends(get_db)):
    """
    Register a new user account and return a token for immediate login.

    Self-registered users are never admins.
    """
    user = user_crud.register(db, request)
    logger.info(f"New user registered: {user.username}")

    return TokenResponse(access_token=create_access_token(user.username, user.is_admin))
