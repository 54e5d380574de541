from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class FriendAddRequest(BaseModel):
    friend_id: Optional[int] = Field(None, description="ID of the user to add as a friend")

class FriendshipResponse(BaseModel):
    id: int
    user1_id: int
    user2_id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class FriendAddResponse(BaseModel):
    message: str
    friendship: FriendshipResponse

class FriendCheckResponse(BaseModel):
    is_friend: bool

class StatusMessage(BaseModel):
    message: str
