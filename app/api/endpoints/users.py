"""
User management and job application endpoints.

Admins can manage every user; a logged-in user can manage only their own
account and applications.
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_admin_user, get_user_or_admin
from app.core.security import create_access_token
from app.crud import application as application_crud
from app.crud import user as user_crud
from app.models.user import User
from app.schemas.user import (
    ApplicationResponse,
    UserCreateRequest,
    UserCreateResponse,
    UserDetailResponse,
    UserListResponse,
    UserResponse,
    UserUpdateRequest,
)

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=201, response_model=UserCreateResponse)
def create_user(
    request: UserCreateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user)
):
    """
    Add a user, who may be an admin. Not the registration endpoint.

    Returns the new user and a token for them.

    Authorization required: admin
    """
    user = user_crud.register(db, request, is_admin=request.is_admin)
    logger.info(f"Admin {admin.username} created user {user.username} (admin={user.is_admin})")

    return UserCreateResponse(
        user=UserResponse.model_validate(user),
        access_token=create_access_token(user.username, user.is_admin),
    )


@router.get("/", response_model=UserListResponse)
def list_users(
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user)
):
    """
    List all users and all job applications.

    Authorization required: admin
    """
    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in user_crud.get_all(db)],
        applications=[ApplicationResponse.model_validate(a) for a in application_crud.get_all(db)],
    )


@router.get("/{username}", response_model=UserDetailResponse)
def get_user(
    username: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_user_or_admin)
):
    """
    Retrieve a user and the ids of the jobs they applied to.

    Authorization required: admin or same user
    """
    user = user_crud.get_by_username(db, username)

    response = UserDetailResponse.model_validate(user)
    response.jobs = [a.job_id for a in application_crud.get_for_user(db, username)]
    return response


@router.patch("/{username}", response_model=UserResponse)
def update_user(
    username: str,
    request: UserUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_user_or_admin)
):
    """
    Partially update a user. Fields can be: firstName, lastName, password, email, isAdmin.

    Only admins may change isAdmin.

    Authorization required: admin or same user
    """
    payload = request.model_dump(by_alias=True, exclude_unset=True)

    if "isAdmin" in payload and not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required to change isAdmin"
        )

    user = user_crud.update(db, username, payload)
    logger.info(f"Updated user {username}: {sorted(payload)}")
    return user


@router.delete("/{username}", status_code=204)
def delete_user(
    username: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_user_or_admin)
):
    """
    Delete a user after withdrawing all of their applications.

    Authorization required: admin or same user
    """
    withdrawn = user_crud.delete(db, username)

    logger.info(f"Deleted user {username} ({withdrawn} applications withdrawn)")
    return None


@router.get("/{username}/jobs", response_model=List[ApplicationResponse])
def list_applications(
    username: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_user_or_admin)
):
    """
    List a user's job applications.

    Authorization required: admin or same user
    """
    user_crud.get_by_username(db, username)
    return application_crud.get_for_user(db, username)


@router.post("/{username}/jobs/{job_id}", status_code=201, response_model=ApplicationResponse)
def apply_to_job(
    username: str,
    job_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_user_or_admin)
):
    """
    Apply the user to a job.

    Authorization required: admin or same user
    """
    application = application_crud.create(db, username, job_id)
    logger.info(f"User {username} applied to job {job_id}")
    return application


@router.get("/{username}/jobs/{job_id}", response_model=ApplicationResponse)
def get_application(
    username: str,
    job_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_user_or_admin)
):
    """
    Retrieve one of the user's applications.

    Authorization required: admin or same user
    """
    return application_crud.get(db, username, job_id)


@router.delete("/{username}/jobs/{job_id}", status_code=204)
def withdraw_application(
    username: str,
    job_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_user_or_admin)
):
    """
    Withdraw one of the user's applications.

    Authorization required: admin or same user
    """
    application_crud.delete(db, username, job_id)
    logger.info(f"User {username} withdrew application to job {job_id}")
    return None
