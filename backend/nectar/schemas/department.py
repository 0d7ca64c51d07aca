"""Department schemas."""

from pydantic import BaseModel, Field


class DepartmentInput(BaseModel):
    code: str = Field(min_length=2, max_length=10, pattern=r"^[A-Za-z0-9]+$")
    name: str = Field(min_length=3, max_length=100)


class DepartmentResponse(BaseModel):
    id: int
    code: str
    name: str

    class Config:
        from_attributes = True
