"""
CRUD operations for job applications (user <-> job join rows).
"""

from typing import List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import DuplicateError, NotFoundError
from app.models.application import Application
from app.models.job import Job
from app.models.user import User


def create(db: Session, username: str, job_id: int) -> Application:
    """
    Record that a user applied to a job.

    Raises:
        NotFoundError: If the user or the job does not exist
        DuplicateError: If the user already applied to this job
    """
    if db.get(User, username) is None:
        raise NotFoundError(f"No user: {username}")
    if db.get(Job, job_id) is None:
        raise NotFoundError(f"No job: {job_id}")
    if db.get(Application, (username, job_id)) is not None:
        raise DuplicateError(f"Already applied: {username}, {job_id}")

    application = Application(username=username, job_id=job_id)
    db.add(application)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError(f"Already applied: {username}, {job_id}")

    db.refresh(application)
    return application


def get(db: Session, username: str, job_id: int) -> Application:
    """
    Retrieve one application.

    Raises:
        NotFoundError: If the user has not applied to this job
    """
    application = db.get(Application, (username, job_id))
    if application is None:
        raise NotFoundError(f"No application: {username}, {job_id}")
    return application


def get_for_user(db: Session, username: str) -> List[Application]:
    """Return a user's applications ordered by job id."""
    return (
        db.query(Application)
        .filter(Application.username == username)
        .order_by(Application.job_id)
        .all()
    )


def get_all(db: Session) -> List[Application]:
    """Return every application ordered by username, then job id."""
    return db.query(Application).order_by(Application.username, Application.job_id).all()


def delete(db: Session, username: str, job_id: int) -> None:
    """
    Withdraw one application.

    Raises:
        NotFoundError: If the user has not applied to this job
    """
    application = get(db, username, job_id)
    db.delete(application)
    db.commit()
