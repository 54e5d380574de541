from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class Notification(BaseModel):
    id: int
    message: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
