from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class MessageCreate(BaseModel):
    receiver_id: Optional[int] = None
    text: Optional[str] = None

class Message(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    text: str
    is_read: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ConversationSummary(BaseModel):
    """One row per friend: unread badge plus time of the latest message"""
    friend_id: int
    name: str
    profile_pic: Optional[str] = None
    unread_count: int = 0
    last_message_time: Optional[datetime] = None
