from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List
from cafe_api.exceptions import NotFoundError, InternalError
from cafe_api.models import Notification
from cafe_api.utils.logger import get_logger

logger = get_logger(__name__)

def notify(db: Session, user_id: int, message: str) -> Notification:
    """Append a notification to a user's inbox."""
    try:
        notification = Notification(user_id=user_id, message=message)
        db.add(notification)
        db.commit()
        db.refresh(notification)
        return notification
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating notification for user {user_id}: {e}")
        raise InternalError() from e

def get_notifications(db: Session, user_id: int) -> List[Notification]:
    """All notifications for a user, newest first."""
    try:
        return db.query(Notification).filter(
            Notification.user_id == user_id
        ).order_by(Notification.created_at.desc(), Notification.id.desc()).all()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching notifications for user {user_id}: {e}")
        raise InternalError() from e

def dismiss_notification(db: Session, notification_id: int, user_id: int) -> None:
    """Delete a notification owned by the user; dismissal is permanent."""
    try:
        deleted = db.query(Notification).filter(
            Notification.id == notification_id,
            Notification.user_id == user_id
        ).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error dismissing notification {notification_id}: {e}")
        raise InternalError() from e

    if not deleted:
        raise NotFoundError("Notification not found")
