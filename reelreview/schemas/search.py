"""
Catalog search and filter schemas
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from enum import Enum

from reelreview.schemas.movie import Genre, Movie


class SortOption(str, Enum):
    """Available sort options for the catalog listing"""
    TITLE = "title"
    YEAR = "year"
    RATING = "rating"
    REVIEWS = "reviews"


class MovieQuery(BaseModel):
    """
    Catalog query: filters are ANDed, then sorted, then paginated.
    page/limit are clamped by the catalog service, not rejected here.
    """
    search: Optional[str] = Field(
        None,
        max_length=200,
        description="Case-insensitive match on title, director or cast"
    )
    genre: Optional[Genre] = Field(None, description="Exact genre tag")
    year: Optional[int] = Field(None, description="Release year")
    min_rating: Optional[float] = Field(
        None,
        ge=0,
        le=5,
        description="Minimum average rating (inclusive)"
    )
    sort: SortOption = Field(default=SortOption.TITLE, description="Sort order")
    page: int = Field(default=1, description="1-indexed page number")
    limit: int = Field(default=20, description="Page size")


class MovieListResponse(BaseModel):
    """Schema for a page of catalog results"""
    movies: List[Movie]
    total: int = Field(..., description="Matches before pagination")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"movies": [], "total": 0}
        }
    )
