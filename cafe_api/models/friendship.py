from sqlalchemy import Column, Integer, DateTime, UniqueConstraint, CheckConstraint, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from cafe_api.database import Base

class Friendship(Base):
    """Undirected friendship edge, stored once per pair with user1_id < user2_id."""
    __tablename__ = "friendships"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user1_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    user2_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    user1 = relationship("User", foreign_keys=[user1_id], back_populates="friendships_as_user1")
    user2 = relationship("User", foreign_keys=[user2_id], back_populates="friendships_as_user2")

    __table_args__ = (
        UniqueConstraint('user1_id', 'user2_id', name='unique_friendship'),
        CheckConstraint('user1_id < user2_id', name='friendship_canonical_order'),
    )

    @staticmethod
    def canonical_pair(user_id: int, other_id: int) -> tuple[int, int]:
        user1_id, user2_id = sorted([user_id, other_id])
        return user1_id, user2_id

    def __repr__(self):
        return f"<Friendship id={self.id} user1={self.user1_id} user2={self.user2_id}>"
