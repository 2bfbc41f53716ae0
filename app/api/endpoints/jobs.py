import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_admin_user
from app.crud import job as job_crud
from app.models.user import User
from app.schemas.job import JobCreateRequest, JobResponse, JobUpdateRequest

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=201, response_model=JobResponse)
def create_job(
    request: JobCreateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user)
):
    """
    Create a job posting for an existing company.

    Authorization required: admin
    """
    new_job = job_crud.create(db, request)
    logger.info(f"Created job {new_job.id}: {new_job.title} at {new_job.company_handle}")
    return new_job


@router.get("/", response_model=List[JobResponse])
def list_jobs(
    request: Request,
    title_like: Optional[str] = Query(None, alias="titleLike"),
    company_like: Optional[str] = Query(None, alias="companyLike"),
    min_salary: Optional[int] = Query(None, alias="minSalary"),
    has_equity: Optional[bool] = Query(None, alias="hasEquity"),
    db: Session = Depends(get_db)
):
    """
    List jobs, optionally filtered.

    Filters:
    - titleLike: case-insensitive partial match on title
    - companyLike: case-insensitive partial match on company handle
    - minSalary: salary at least this much (must not be negative)
    - hasEquity: true for jobs with non-zero equity; false is the same as omitting it

    Authorization required: none
    """
    filters = dict(request.query_params)
    filters.update(
        titleLike=title_like,
        companyLike=company_like,
        minSalary=min_salary,
        hasEquity=has_equity,
    )

    return job_crud.search(db, filters)


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """
    Retrieve a job by ID.

    Authorization required: none
    """
    return job_crud.get_by_id(db, job_id)


@router.patch("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user)
):
    """
    Partially update a job. Fields can be: title, salary, equity.

    Authorization required: admin
    """
    payload = request.model_dump(exclude_unset=True)
    job = job_crud.update(db, job_id, payload)
    logger.info(f"Updated job {job_id}: {sorted(payload)}")
    return job


@router.delete("/{job_id}", status_code=204)
def delete_job(
    job_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user)
):
    """
    Delete a job by ID.

    Authorization required: admin
    """
    job_crud.delete(db, job_id)
    logger.info(f"Deleted job {job_id}")
    return None
