from pydantic import BaseModel, Field
from typing import List, Optional


class SearchQuery(BaseModel):
    q: Optional[str] = None
    page: int = Field(default=1, ge=1)
    limit: Optional[int] = Field(default=None, ge=1)
    grade: Optional[str] = None
    publisher: Optional[str] = None
    category: List[str] = Field(default_factory=list)
    element: List[str] = Field(default_factory=list)


class ListingQuery(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: Optional[int] = Field(default=None, ge=1, le=100)
