"""Course schemas."""

from pydantic import BaseModel, Field


class CourseInput(BaseModel):
    code: str = Field(min_length=3, max_length=20)
    name: str = Field(min_length=3, max_length=100)
    credits: float = Field(ge=0.5, le=6)


class CourseResponse(BaseModel):
    id: int
    code: str
    name: str
    credits: float

    class Config:
        from_attributes = True
