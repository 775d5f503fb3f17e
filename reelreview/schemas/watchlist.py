from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime

from reelreview.schemas.movie import Movie


# ==================== WATCHLIST SCHEMAS ====================

class WatchlistAdd(BaseModel):
    """Schema for adding a movie to watchlist"""
    movie_id: str = Field(..., min_length=1, description="Catalog movie ID")


class WatchlistEntry(BaseModel):
    """Stored watchlist entry"""
    id: str
    user_id: str
    movie_id: str
    added_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WatchlistWithMovie(WatchlistEntry):
    """Watchlist entry joined with the full movie record"""
    movie: Movie


class WatchlistCheck(BaseModel):
    """Membership check result"""
    movie_id: str
    in_watchlist: bool
    item_id: str | None = None


class WatchlistStats(BaseModel):
    """Schema for watchlist statistics"""
    total_items: int
