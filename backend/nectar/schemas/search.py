"""Global search schemas."""

from typing import Optional

from pydantic import BaseModel


class SearchResultItem(BaseModel):
    type: str  # User | Course | Class | Department | Notice | Class Event
    id: str
    title: str
    subtitle: Optional[str] = None


class SearchResults(BaseModel):
    query: str
    items: list[SearchResultItem]
    count: int
    error: Optional[str] = None
