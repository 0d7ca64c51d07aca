"""Auth request/response schemas."""

from typing import Optional

from pydantic import BaseModel, Field

from nectar.schemas.user import UserResponse


class SignUpRequest(BaseModel):
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=1)
    role: str  # student | teacher | cr
    dept_code: Optional[str] = None  # required for every self-service role
    student_id: Optional[str] = None  # required for student | cr
    batch: Optional[str] = None
    section: Optional[str] = None
    picture_url: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class SessionResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class SignUpResponse(BaseModel):
    message: str
    user: UserResponse
