"""Class and class-teacher schemas."""

from typing import Optional

from pydantic import BaseModel, Field


class ClassInput(BaseModel):
    dept_id: int
    session: str = Field(min_length=7, max_length=9)  # e.g. 2023-2024
    section: Optional[str] = Field(default=None, max_length=5)
    code: str = Field(min_length=3, max_length=20)


class ClassResponse(BaseModel):
    id: int
    dept_id: int
    session: str
    section: Optional[str] = None
    code: str

    class Config:
        from_attributes = True


class ClassSummary(BaseModel):
    id: int
    code: str
    session: str
    section: Optional[str] = None
    department_name: Optional[str] = None


class TeacherAssignmentInput(BaseModel):
    class_id: int
    teacher_ids: list[str] = Field(min_length=1)
