"""
Import all models to ensure they are registered with SQLAlchemy
"""
from reelreview.models.user import User
from reelreview.models.movie import Movie
from reelreview.models.review import Review
from reelreview.models.watchlist import Watchlist

__all__ = [
    "User",
    "Movie",
    "Review",
    "Watchlist"
]
