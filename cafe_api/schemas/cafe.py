from pydantic import BaseModel
from typing import List, Optional

class Cafe(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    icon: Optional[str] = None
    images: List[str] = []

    class Config:
        from_attributes = True
