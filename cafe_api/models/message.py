from sqlalchemy import Column, Integer, DateTime, ForeignKey, Text, Boolean, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from cafe_api.database import Base

class Message(Base):
    """Direct message between two friends."""
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sender_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    receiver_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    sender = relationship("User", foreign_keys=[sender_id])
    receiver = relationship("User", foreign_keys=[receiver_id])

    __table_args__ = (
        CheckConstraint('sender_id <> receiver_id', name='message_not_to_self'),
    )

    def __repr__(self):
        return f"<Message id={self.id} sender={self.sender_id} receiver={self.receiver_id} read={self.is_read}>"
