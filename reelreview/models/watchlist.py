from sqlalchemy import Column, String, DateTime
from reelreview.database import Base


class Watchlist(Base):
    """
    Watchlist model - Movies saved by users to watch later
    One entry per user per movie, checked by the watchlist service before insert
    """
    __tablename__ = "watchlist"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), nullable=False, index=True)
    movie_id = Column(String(36), nullable=False, index=True)
    added_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<Watchlist(user_id={self.user_id}, movie_id={self.movie_id})>"
