"""
CRUD operations for Job model.

Implements the Repository pattern to encapsulate all database operations
for jobs, providing a clean interface for the API layer.
"""

import logging
from typing import Any, Dict, List, Mapping
from sqlalchemy import TextClause
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import DuplicateError, NotFoundError
from app.core.filters import PG_INTEGER_MAX, Comparison, FieldSpec, ValueTransform, build_filter
from app.core.sql import compile_partial_update
from app.models.company import Company
from app.models.job import Job
from app.schemas.job import JobCreateRequest

logger = logging.getLogger(__name__)

# hasEquity=true means equity > 0; false or absent leaves equity unconstrained
JOB_FILTERS = (
    FieldSpec("titleLike", "title", Comparison.ILIKE, ValueTransform.WILDCARD),
    FieldSpec("companyLike", "company_handle", Comparison.ILIKE, ValueTransform.WILDCARD),
    FieldSpec("minSalary", "salary", Comparison.GREATER_OR_EQUAL, max_value=PG_INTEGER_MAX),
    FieldSpec("hasEquity", "equity", Comparison.GREATER_THAN, ValueTransform.THRESHOLD),
)

# External names match the column names
JOB_COLUMNS: Dict[str, str] = {}

UPDATABLE_FIELDS = ("title", "salary", "equity")

SEARCH_SQL = """
    SELECT id, title, salary, equity, company_handle
    FROM jobs
    WHERE {clause}
    ORDER BY title, id
"""

UPDATE_SQL = "UPDATE jobs SET {clause} WHERE id = ${next}"


def create(db: Session, job_data: JobCreateRequest) -> Job:
    """
    Create a new job.

    Args:
        db: Database session
        job_data: Validated job creation data

    Returns:
        Created Job instance with id

    Raises:
        NotFoundError: If the company does not exist
        DuplicateError: If the company already has a job with this title
    """
    if db.get(Company, job_data.company_handle) is None:
        raise NotFoundError(f"No company: {job_data.company_handle}")

    existing = db.query(Job).filter(
        Job.title == job_data.title,
        Job.company_handle == job_data.company_handle
    ).first()
    if existing:
        raise DuplicateError(f"Duplicate job: {job_data.title}, {job_data.company_handle}")

    db_job = Job(
        title=job_data.title,
        salary=job_data.salary,
        equity=job_data.equity,
        company_handle=job_data.company_handle,
    )
    db.add(db_job)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError(f"Duplicate job: {job_data.title}, {job_data.company_handle}")

    db.refresh(db_job)
    return db_job


def search_statement(filters: Mapping[str, Any]) -> TextClause:
    """Build the job search SELECT for the given filters."""
    clause = build_filter(JOB_FILTERS, filters)
    logger.debug(f"Job search: WHERE {clause.sql} {clause.params}")
    return clause.to_statement(SEARCH_SQL)


def search(db: Session, filters: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """
    Find jobs matching optional filters.

    Args:
        db: Database session
        filters: Any of titleLike, companyLike, minSalary, hasEquity

    Returns:
        List of job rows as dicts, ordered by title
    """
    rows = db.execute(search_statement(filters)).mappings().all()
    return [dict(row) for row in rows]


def get_by_id(db: Session, job_id: int) -> Job:
    """
    Retrieve a job by its ID.

    Raises:
        NotFoundError: If no such job
    """
    job = db.get(Job, job_id)
    if job is None:
        raise NotFoundError(f"No job: {job_id}")
    return job


def update(db: Session, job_id: int, payload: Mapping[str, Any]) -> Job:
    """
    Partially update a job. Only title, salary and equity can change.

    Raises:
        EmptyPayloadError: If payload is empty
        UnknownFieldError: If payload names any other field
        NotFoundError: If no such job
        DuplicateError: If the new title clashes with another job of the company
    """
    clause = compile_partial_update(payload, JOB_COLUMNS, allowed=UPDATABLE_FIELDS)

    try:
        result = db.execute(clause.to_statement(UPDATE_SQL, job_id))
    except IntegrityError:
        db.rollback()
        raise DuplicateError(f"Duplicate job: {payload.get('title')}")

    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError(f"No job: {job_id}")

    db.commit()
    return get_by_id(db, job_id)


def delete(db: Session, job_id: int) -> None:
    """
    Delete a job by ID.

    Raises:
        NotFoundError: If no such job
    """
    job = get_by_id(db, job_id)
    db.delete(job)
    db.commit()
