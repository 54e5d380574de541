from sqlalchemy import Column, Integer, DateTime, UniqueConstraint, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from cafe_api.database import Base

class Like(Base):
    """Existence of a row means the user likes the review."""
    __tablename__ = "likes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    review_id = Column(Integer, ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())

    review = relationship("Review", back_populates="likes")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint('review_id', 'user_id', name='unique_review_like'),
    )

    def __repr__(self):
        return f"<Like review={self.review_id} user={self.user_id}>"
