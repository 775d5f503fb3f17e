from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from reelreview.database import Base

class Review(Base):
    """
    Star-rated review of a movie.
    user_id / movie_id are plain columns: deleting a movie or user leaves its
    reviews behind and the read paths skip them.
    """
    __tablename__ = "reviews"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), nullable=False, index=True)
    movie_id = Column(String(36), nullable=False, index=True)
    rating = Column(Integer, nullable=False)  # 1-5 stars
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    spoiler_warning = Column(Boolean, nullable=False, default=False)
    likes = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<Review(id={self.id}, movie_id={self.movie_id}, rating={self.rating})>"
