"""
Pydantic schemas for Company API requests/responses.

Requests accept the camelCase names (numEmployees, logoUrl) as well as the
column names; responses are serialized with the camelCase names.
"""

from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


class CompanyCreateRequest(BaseModel):
    """Schema for creating a company"""
    handle: str = Field(..., min_length=1, max_length=25, pattern=r"^[a-z0-9-]+$")
    name: str = Field(..., min_length=1)
    description: str
    num_employees: Optional[int] = Field(None, ge=0, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    class Config:
        populate_by_name = True
        extra = "forbid"


class CompanyUpdateRequest(BaseModel):
    """Schema for a partial company update. Only fields that are sent are changed."""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    class Config:
        populate_by_name = True
        extra = "forbid"

    @field_validator("name", "description")
    @classmethod
    def reject_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("may not be null")
        return v


class CompanyJobResponse(BaseModel):
    """Job as listed inside a company"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[float] = None

    class Config:
        from_attributes = True


class CompanyResponse(BaseModel):
    """Schema for company response"""
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = Field(None, serialization_alias="numEmployees")
    logo_url: Optional[str] = Field(None, serialization_alias="logoUrl")

    class Config:
        from_attributes = True


class CompanyDetailResponse(CompanyResponse):
    """Company with its jobs"""
    jobs: List[CompanyJobResponse] = []
