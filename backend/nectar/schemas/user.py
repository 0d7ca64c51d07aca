"""User profile schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UserResponse(BaseModel):
    id: str
    email: str
    full_name: str
    role: str
    dept_code: Optional[str] = None
    student_id: Optional[str] = None
    batch: Optional[str] = None
    section: Optional[str] = None
    picture_url: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdminCreateUser(BaseModel):
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=1)
    role: str  # admin | teacher | student | cr
    dept_code: Optional[str] = None
    student_id: Optional[str] = None
    batch: Optional[str] = None
    section: Optional[str] = None
    picture_url: Optional[str] = None


class AdminUpdateUser(BaseModel):
    full_name: Optional[str] = None
    dept_code: Optional[str] = None
    role: Optional[str] = None
    student_id: Optional[str] = None
    batch: Optional[str] = None
    section: Optional[str] = None
    picture_url: Optional[str] = None


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    picture_url: Optional[str] = None
    section: Optional[str] = None


class RoleChangeResponse(BaseModel):
    message: str
    user: UserResponse


class ProfilePictureResponse(BaseModel):
    message: str
    picture_url: str
    user: UserResponse
