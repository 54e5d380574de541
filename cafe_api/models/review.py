from sqlalchemy import Column, Integer, DateTime, ForeignKey, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from cafe_api.database import Base
import json

class Review(Base):
    """A user's review of a café, with optional photos."""
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    cafe_id = Column(Integer, ForeignKey("cafes.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False)
    photo = Column(Text, nullable=True)  # JSON array of photo URLs, NULL when there are none
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="reviews")
    cafe = relationship("Cafe", back_populates="reviews")
    likes = relationship("Like", back_populates="review", cascade="all, delete-orphan")

    @property
    def photos(self) -> list[str]:
        if not self.photo:
            return []
        try:
            data = json.loads(self.photo)
        except ValueError:
            return []
        return [str(p) for p in data if p] if isinstance(data, list) else []

    @staticmethod
    def serialize_photos(photo_urls: list[str] | None) -> str | None:
        return json.dumps(list(photo_urls)) if photo_urls else None

    def __repr__(self):
        return f"<Review id={self.id} user_id={self.user_id} cafe_id={self.cafe_id} rating={self.rating}>"
