import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_admin_user
from app.crud import company as company_crud
from app.models.user import User
from app.schemas.company import (
    CompanyCreateRequest,
    CompanyDetailResponse,
    CompanyResponse,
    CompanyUpdateRequest,
)

router = APIRouter(prefix="/companies", tags=["Companies"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=201, response_model=CompanyResponse)
def create_company(
    request: CompanyCreateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user)
):
    """
    Create a company.

    Authorization required: admin
    """
    company = company_crud.create(db, request)
    logger.info(f"Created company {company.handle} (by {admin.username})")
    return company


@router.get("/", response_model=List[CompanyResponse])
def list_companies(
    request: Request,
    min_employees: Optional[int] = Query(None, alias="minEmployees"),
    max_employees: Optional[int] = Query(None, alias="maxEmployees"),
    name_like: Optional[str] = Query(None, alias="nameLike"),
    db: Session = Depends(get_db)
):
    """
    List companies ordered by name, optionally filtered.

    Filters:
    - minEmployees: at least this many employees
    - maxEmployees: at most this many employees
    - nameLike: case-insensitive partial match on name

    Any other query parameter is rejected with 400.

    Authorization required: none
    """
    if min_employees is not None and max_employees is not None and min_employees > max_employees:
        raise HTTPException(status_code=400, detail="minEmployees cannot be more than maxEmployees")

    # Undeclared parameters stay in the mapping so the filter builder rejects them
    filters = dict(request.query_params)
    filters.update(minEmployees=min_employees, maxEmployees=max_employees, nameLike=name_like)

    return company_crud.search(db, filters)


@router.get("/{handle}", response_model=CompanyDetailResponse)
def get_company(handle: str, db: Session = Depends(get_db)):
    """
    Retrieve a company and its jobs.

    Authorization required: none
    """
    return company_crud.get_by_handle(db, handle)


@router.patch("/{handle}", response_model=CompanyResponse)
def update_company(
    handle: str,
    request: CompanyUpdateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user)
):
    """
    Partially update a company. Fields can be: name, description, numEmployees, logoUrl.

    Authorization required: admin
    """
    payload = request.model_dump(by_alias=True, exclude_unset=True)
    company = company_crud.update(db, handle, payload)
    logger.info(f"Updated company {handle}: {sorted(payload)}")
    return company


@router.delete("/{handle}", status_code=204)
def delete_company(
    handle: str,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user)
):
    """
    Delete a company and its jobs.

    Authorization required: admin
    """
    company_crud.delete(db, handle)
    logger.info(f"Deleted company {handle}")
    return None
