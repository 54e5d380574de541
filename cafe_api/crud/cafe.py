from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
from cafe_api.exceptions import NotFoundError, InternalError
from cafe_api.models import Cafe
from cafe_api.utils.logger import get_logger

logger = get_logger(__name__)

def get_cafes(db: Session) -> List[Cafe]:
    """All cafés in ID order."""
    try:
        return db.query(Cafe).order_by(Cafe.id.asc()).all()
    except SQLAlchemyError as e:
        logger.error(f"Error listing cafes: {e}")
        raise InternalError() from e

def get_cafe(db: Session, cafe_id: int) -> Cafe:
    try:
        cafe = db.query(Cafe).filter(Cafe.id == cafe_id).first()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching cafe {cafe_id}: {e}")
        raise InternalError() from e
    if not cafe:
        raise NotFoundError("Cafe not found")
    return cafe

def create_cafe(
    db: Session,
    name: str,
    description: Optional[str] = None,
    location: Optional[str] = None,
    icon: Optional[str] = None,
    images: Optional[List[str]] = None,
) -> Cafe:
    """Create a café (used by the seed script and tests)."""
    cafe = Cafe(name=name, description=description, location=location, icon=icon)
    cafe.images = images
    try:
        db.add(cafe)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating cafe {name!r}: {e}")
        raise InternalError() from e
    db.refresh(cafe)
    return cafe
