from pydantic import BaseModel, Field, field_validator
from typing import Optional


class JobCreateRequest(BaseModel):
    """Schema for creating a new job"""
    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[float] = Field(None, ge=0, le=1)
    company_handle: str = Field(..., min_length=1, max_length=25, alias="companyHandle")

    class Config:
        populate_by_name = True
        extra = "forbid"


class JobUpdateRequest(BaseModel):
    """
    Schema for a partial job update.

    The id and company handle of a job cannot be changed.
    """
    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[float] = Field(None, ge=0, le=1)

    class Config:
        extra = "forbid"

    @field_validator("title")
    @classmethod
    def reject_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("may not be null")
        return v


class JobResponse(BaseModel):
    """Schema for job response"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[float] = None
    company_handle: str = Field(..., serialization_alias="companyHandle")

    class Config:
        from_attributes = True
