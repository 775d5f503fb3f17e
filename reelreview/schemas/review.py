"""
Review Schemas - Pydantic models for review request/response validation
Follows the same pattern as watchlist schemas for consistency
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator
from datetime import datetime
from decimal import Decimal
from typing import Optional, List, Dict

from reelreview.schemas.movie import Movie, MovieSummary
from reelreview.schemas.user import UserSummary
from reelreview.schemas.validation import SafeStringMixin, MIN_REVIEW_LENGTH


class ReviewCreate(BaseModel, SafeStringMixin):
    """Schema for writing a review"""
    rating: int = Field(..., ge=1, le=5, description="Star rating (1-5)")
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=MIN_REVIEW_LENGTH, max_length=5000)
    spoiler_warning: bool = False

    @field_validator('title')
    @classmethod
    def clean_title(cls, v):
        return cls.validate_no_script(v)

    @field_validator('content')
    @classmethod
    def clean_content(cls, v):
        return cls.clean_review_text(v)


class ReviewUpdate(BaseModel, SafeStringMixin):
    """Schema for editing a review; omitted fields stay unchanged"""
    rating: Optional[int] = Field(None, ge=1, le=5)
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, min_length=MIN_REVIEW_LENGTH, max_length=5000)
    spoiler_warning: Optional[bool] = None

    @field_validator('title')
    @classmethod
    def clean_title(cls, v):
        return cls.validate_no_script(v) if v is not None else v

    @field_validator('content')
    @classmethod
    def clean_content(cls, v):
        return cls.clean_review_text(v) if v is not None else v


class Review(BaseModel):
    """Stored review record"""
    id: str
    user_id: str
    movie_id: str
    rating: int = Field(..., ge=1, le=5)
    title: str
    content: str
    spoiler_warning: bool = False
    likes: int = Field(0, ge=0)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReviewWithUser(Review):
    """
    Review joined with its author and movie
    Useful for displaying reviews without client-side joins
    """
    user: UserSummary
    movie: MovieSummary


class MovieWithReviews(Movie):
    """Movie detail page payload"""
    reviews: List[ReviewWithUser] = []


class RatingStats(BaseModel):
    """Rating statistics for a movie or a reviewer"""
    total_ratings: int = Field(..., description="Number of reviews counted")
    average_rating: Decimal = Field(..., description="Mean star rating, two decimals")
    rating_distribution: Dict[str, int] = Field(
        ...,
        description="Distribution of ratings (1-5)"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "total_ratings": 12,
                "average_rating": "4.25",
                "rating_distribution": {"1": 0, "2": 1, "3": 1, "4": 4, "5": 6}
            }
        }
    )
