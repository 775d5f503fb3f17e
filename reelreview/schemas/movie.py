"""
Movie schemas - catalog records and curation payloads
"""
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, List


class Genre(str, Enum):
    """Fixed genre vocabulary of the catalog"""
    ACTION = "action"
    ADVENTURE = "adventure"
    ANIMATION = "animation"
    COMEDY = "comedy"
    CRIME = "crime"
    DOCUMENTARY = "documentary"
    DRAMA = "drama"
    FAMILY = "family"
    FANTASY = "fantasy"
    HISTORY = "history"
    HORROR = "horror"
    MUSIC = "music"
    MYSTERY = "mystery"
    ROMANCE = "romance"
    SCIENCE_FICTION = "science_fiction"
    THRILLER = "thriller"
    WAR = "war"
    WESTERN = "western"


class MovieCreate(BaseModel):
    """Schema for adding a movie to the catalog"""
    tmdb_id: Optional[int] = Field(None, gt=0, description="External catalog ID")
    title: str = Field(..., min_length=1, max_length=300)
    synopsis: str = Field(..., min_length=1)
    director: str = Field(..., min_length=1, max_length=200)
    cast: List[str] = Field(default_factory=list, description="Cast names, billing order")
    genres: List[Genre] = Field(default_factory=list)
    release_year: int = Field(..., ge=1870, le=2100)
    duration: int = Field(..., gt=0, description="Runtime in minutes")
    poster_url: Optional[str] = None
    backdrop_url: Optional[str] = None
    trailer_url: Optional[str] = None
    featured: bool = False
    trending: bool = False


class MovieUpdate(BaseModel):
    """
    Schema for catalog curation updates.
    Derived fields (average_rating, review_count) are not accepted here.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    synopsis: Optional[str] = Field(None, min_length=1)
    director: Optional[str] = Field(None, min_length=1, max_length=200)
    cast: Optional[List[str]] = None
    genres: Optional[List[Genre]] = None
    release_year: Optional[int] = Field(None, ge=1870, le=2100)
    duration: Optional[int] = Field(None, gt=0)
    poster_url: Optional[str] = None
    backdrop_url: Optional[str] = None
    trailer_url: Optional[str] = None
    featured: Optional[bool] = None
    trending: Optional[bool] = None


class Movie(BaseModel):
    """Stored movie record"""
    id: str
    tmdb_id: Optional[int] = None
    title: str
    synopsis: str
    director: str
    cast: List[str] = []
    genres: List[Genre] = []
    release_year: int
    duration: int
    poster_url: Optional[str] = None
    backdrop_url: Optional[str] = None
    trailer_url: Optional[str] = None
    average_rating: Decimal = Decimal("0")
    review_count: int = Field(0, ge=0)
    featured: bool = False
    trending: bool = False
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MovieSummary(BaseModel):
    """Minimal movie projection attached to reviews"""
    id: str
    title: str
    poster_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class GenreListResponse(BaseModel):
    genres: List[Genre]
