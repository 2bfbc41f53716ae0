"""
CRUD operations for Company model.

Searches and partial updates run as fixed SQL templates completed by the
compiled filter / SET clauses; everything else goes through the ORM.
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
from app.schemas.company import CompanyCreateRequest

logger = logging.getLogger(__name__)

# Declared order fixes placeholder numbering
COMPANY_FILTERS = (
    FieldSpec("minEmployees", "num_employees", Comparison.GREATER_OR_EQUAL, max_value=PG_INTEGER_MAX),
    FieldSpec("maxEmployees", "num_employees", Comparison.LESS_OR_EQUAL, max_value=PG_INTEGER_MAX),
    FieldSpec("nameLike", "name", Comparison.ILIKE, ValueTransform.WILDCARD),
)

COMPANY_COLUMNS = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}

UPDATABLE_FIELDS = ("name", "description", "numEmployees", "logoUrl")

SEARCH_SQL = """
    SELECT handle, name, description, num_employees, logo_url
    FROM companies
    WHERE {clause}
    ORDER BY name
"""

UPDATE_SQL = "UPDATE companies SET {clause} WHERE handle = ${next}"


def create(db: Session, company_data: CompanyCreateRequest) -> Company:
    """
    Create a new company.

    Args:
        db: Database session
        company_data: Validated company data

    Returns:
        Created Company instance

    Raises:
        DuplicateError: If the handle or name is already taken
    """
    if db.get(Company, company_data.handle) is not None:
        raise DuplicateError(f"Duplicate company: {company_data.handle}")

    db_company = Company(
        handle=company_data.handle,
        name=company_data.name,
        description=company_data.description,
        num_employees=company_data.num_employees,
        logo_url=company_data.logo_url,
    )
    db.add(db_company)

    # Unique constraints are the authoritative duplicate guard
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError(f"Duplicate company: {company_data.handle}")

    db.refresh(db_company)
    return db_company


def search_statement(filters: Mapping[str, Any]) -> TextClause:
    """Build the company search SELECT for the given filters."""
    clause = build_filter(COMPANY_FILTERS, filters)
    logger.debug(f"Company search: WHERE {clause.sql} {clause.params}")
    return clause.to_statement(SEARCH_SQL)


def search(db: Session, filters: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """
    Find companies matching optional filters, ordered by name.

    Args:
        db: Database session
        filters: Any of minEmployees, maxEmployees, nameLike (None = not filtered)

    Returns:
        List of company rows as dicts
    """
    rows = db.execute(search_statement(filters)).mappings().all()
    return [dict(row) for row in rows]


def get_by_handle(db: Session, handle: str) -> Company:
    """
    Retrieve a company by handle.

    Raises:
        NotFoundError: If no such company
    """
    company = db.get(Company, handle)
    if company is None:
        raise NotFoundError(f"No company: {handle}")
    return company


def update(db: Session, handle: str, payload: Mapping[str, Any]) -> Company:
    """
    Partially update a company.

    Args:
        db: Database session
        handle: Company handle
        payload: Fields to change, keyed by external name (name, description,
            numEmployees, logoUrl)

    Returns:
        Updated Company instance

    Raises:
        EmptyPayloadError: If payload is empty
        UnknownFieldError: If payload names a field that cannot be updated
        NotFoundError: If no such company
        DuplicateError: If the new name is already taken
    """
    clause = compile_partial_update(payload, COMPANY_COLUMNS, allowed=UPDATABLE_FIELDS)

    try:
        result = db.execute(clause.to_statement(UPDATE_SQL, handle))
    except IntegrityError:
        db.rollback()
        raise DuplicateError(f"Duplicate company name: {payload.get('name')}")

    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError(f"No company: {handle}")

    db.commit()
    return get_by_handle(db, handle)


def delete(db: Session, handle: str) -> None:
    """
    Delete a company and, through the cascade, its jobs.

    Raises:
        NotFoundError: If no such company
    """
    company = get_by_handle(db, handle)
    db.delete(company)
    db.commit()
