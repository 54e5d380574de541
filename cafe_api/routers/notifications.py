from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from cafe_api.database import get_db
from cafe_api.auth import get_current_user
from cafe_api import crud
from cafe_api.exceptions import ServiceError, InternalError
from cafe_api.schemas.friends import StatusMessage
from cafe_api.schemas.notification import Notification
from cafe_api.schemas.user import CurrentUser
from cafe_api.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])

@router.get("", response_model=List[Notification])
async def get_notifications(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Notifications for the logged-in user, newest first"""
    try:
        notifications = crud.get_notifications(db, current_user.id)
        logger.debug(f"Found {len(notifications)} notifications for user {current_user.id}")
        return [Notification.model_validate(n) for n in notifications]
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Notifications fetch error: {e}")
        raise InternalError()

@router.delete("/{notification_id}", response_model=StatusMessage)
async def dismiss_notification(
    notification_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Dismiss (delete) a notification"""
    try:
        crud.dismiss_notification(db, notification_id, current_user.id)
        return StatusMessage(message="Notification removed")
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Delete notification error: {e}")
        raise InternalError()
