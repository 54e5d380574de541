from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from cafe_api.database import get_db
from cafe_api import crud, schemas
from cafe_api.exceptions import ServiceError, InternalError
from cafe_api.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/cafes", tags=["cafes"])


@router.get("", response_model=List[schemas.Cafe])
async def list_cafes(db: Session = Depends(get_db)):
    try:
        return [schemas.Cafe.model_validate(c) for c in crud.get_cafes(db)]
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Error listing cafes: {e}")
        raise InternalError()


@router.get("/{cafe_id}", response_model=schemas.Cafe)
async def get_cafe(cafe_id: int, db: Session = Depends(get_db)):
    try:
        return schemas.Cafe.model_validate(crud.get_cafe(db, cafe_id))
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Error fetching cafe {cafe_id}: {e}")
        raise InternalError()
