"""
Pydantic schemas for users, authentication and job applications.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Optional


class UserRegisterRequest(BaseModel):
    """Request schema for self-registration. Registered users are never admins."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=5, max_length=72)  # bcrypt limit
    first_name: str = Field(..., min_length=1, alias="firstName")
    last_name: str = Field(..., min_length=1, alias="lastName")
    email: EmailStr

    class Config:
        populate_by_name = True
        extra = "forbid"


class UserCreateRequest(UserRegisterRequest):
    """Request schema for admins adding a user, who may be an admin."""
    is_admin: bool = Field(False, alias="isAdmin")


class UserUpdateRequest(BaseModel):
    """Partial user update. Only fields that are sent are changed."""
    first_name: Optional[str] = Field(None, min_length=1, alias="firstName")
    last_name: Optional[str] = Field(None, min_length=1, alias="lastName")
    password: Optional[str] = Field(None, min_length=5, max_length=72)
    email: Optional[EmailStr] = None
    is_admin: Optional[bool] = Field(None, alias="isAdmin")

    class Config:
        populate_by_name = True
        extra = "forbid"

    @field_validator("first_name", "last_name", "password", "email", "is_admin")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class TokenRequest(BaseModel):
    """Request schema for logging in."""
    username: str
    password: str


class TokenResponse(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    """User profile response (no password)."""
    username: str
    first_name: str = Field(..., serialization_alias="firstName")
    last_name: str = Field(..., serialization_alias="lastName")
    email: str
    is_admin: bool = Field(..., serialization_alias="isAdmin")

    class Config:
        from_attributes = True


class UserCreateResponse(BaseModel):
    """Newly created user plus a token for them."""
    user: UserResponse
    access_token: str
    token_type: str = "bearer"


class ApplicationResponse(BaseModel):
    """A user's application to a job."""
    username: str
    job_id: int = Field(..., serialization_alias="jobId")

    class Config:
        from_attributes = True


class UserDetailResponse(UserResponse):
    """User profile with the ids of jobs they applied to."""
    jobs: List[int] = []


class UserListResponse(BaseModel):
    """All users and all job applications."""
    users: List[UserResponse]
    applications: List[ApplicationResponse]
