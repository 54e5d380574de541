from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from cafe_api.database import get_db
from cafe_api.auth import get_current_user
from cafe_api import crud
from cafe_api.exceptions import ServiceError, InternalError
from cafe_api.schemas.user import CurrentUser, UserResponse, ProfileResponse
from cafe_api.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=ProfileResponse)
async def get_my_profile(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        return ProfileResponse(profile=UserResponse.model_validate(crud.get_user_or_404(db, current_user.id)))
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Profile fetch error: {e}")
        raise InternalError()


@router.get("/{user_id}", response_model=ProfileResponse)
async def get_profile(user_id: int, db: Session = Depends(get_db)):
    """Public profile of any user"""
    try:
        return ProfileResponse(profile=UserResponse.model_validate(crud.get_user_or_404(db, user_id)))
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Profile fetch error for user {user_id}: {e}")
        raise InternalError()
