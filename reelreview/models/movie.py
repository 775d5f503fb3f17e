from sqlalchemy import Column, Integer, String, Boolean, JSON, DateTime
from reelreview.database import Base

class Movie(Base):
    __tablename__ = "movies"
    
    id = Column(String(36), primary_key=True)
    tmdb_id = Column(Integer, nullable=True, index=True)
    title = Column(String, nullable=False)
    synopsis = Column(String, nullable=False)
    director = Column(String, nullable=False)
    cast = Column(JSON, nullable=False)  # Ordered list of names
    genres = Column(JSON, nullable=False)  # List of genre tags
    release_year = Column(Integer, nullable=False, index=True)
    duration = Column(Integer, nullable=False)  # Minutes
    poster_url = Column(String, nullable=True)
    backdrop_url = Column(String, nullable=True)
    trailer_url = Column(String, nullable=True)
    # Decimal kept as text ("0", "4.50") so every dialect round-trips the scale
    average_rating = Column(String(8), nullable=False, default="0")
    review_count = Column(Integer, nullable=False, default=0)
    featured = Column(Boolean, nullable=False, default=False)
    trending = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<Movie(id={self.id}, title={self.title})>"
