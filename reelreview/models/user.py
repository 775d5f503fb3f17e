from sqlalchemy import Column, String, DateTime
from reelreview.database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    username = Column(String(30), index=True, nullable=False)
    email = Column(String(255), index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    profile_picture = Column(String, nullable=True)
    join_date = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username})>"
