from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship
from cafe_api.database import Base
import json

class Cafe(Base):
    """Café that users can review."""
    __tablename__ = "cafes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String, nullable=True)
    icon = Column(String, nullable=True)
    images_json = Column(Text, nullable=True)  # JSON array of image URLs

    reviews = relationship("Review", back_populates="cafe", cascade="all, delete-orphan")

    @property
    def images(self) -> list[str]:
        if not self.images_json:
            return []
        try:
            data = json.loads(self.images_json)
        except ValueError:
            return []
        return [str(x) for x in data] if isinstance(data, list) else []

    @images.setter
    def images(self, value: list[str] | None) -> None:
        self.images_json = json.dumps(list(value)) if value else None

    def __repr__(self):
        return f"<Cafe id={self.id} name='{self.name}'>"
