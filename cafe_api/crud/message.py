from sqlalchemy.orm import Session
from sqlalchemy import and_, or_, select, func
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
from cafe_api.crud.friends import FriendsCRUD
from cafe_api.exceptions import InvalidArgumentError, ForbiddenError, NotFoundError, InternalError
from cafe_api.models import Friendship, Message, User
from cafe_api.schemas.message import ConversationSummary
from cafe_api.utils.logger import get_logger

logger = get_logger(__name__)

def _between(user_id: int, other_id):
    """Filter for messages exchanged between two users in either direction."""
    return or_(
        and_(Message.sender_id == user_id, Message.receiver_id == other_id),
        and_(Message.sender_id == other_id, Message.receiver_id == user_id)
    )

def send_message(db: Session, sender_id: int, receiver_id: Optional[int], text: Optional[str]) -> Message:
    """
    Store a message from sender to receiver.

    The friendship check runs before the text check, so a message to a
    non-friend is always refused with ForbiddenError whatever its text.

    Raises:
        InvalidArgumentError: receiver missing, receiver is the sender, or blank text
        NotFoundError: receiver does not exist
        ForbiddenError: sender and receiver are not friends
    """
    if not receiver_id:
        raise InvalidArgumentError("Receiver and message text required")
    if receiver_id == sender_id:
        raise InvalidArgumentError("Cannot message yourself")

    if not db.query(User.id).filter(User.id == receiver_id).first():
        raise NotFoundError("User not found")
    if not FriendsCRUD.are_friends(db, sender_id, receiver_id):
        raise ForbiddenError("You can only message friends")

    if text is None or not text.strip():
        raise InvalidArgumentError("Receiver and message text required")

    db_message = Message(sender_id=sender_id, receiver_id=receiver_id, text=text.strip())
    try:
        db.add(db_message)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error sending message: {e}")
        raise InternalError() from e

    db.refresh(db_message)
    return db_message

def get_conversation(db: Session, user_id: int, friend_id: int) -> List[Message]:
    """
    All messages between user_id and friend_id, oldest first.

    Every call also marks the messages friend_id sent to user_id as read.
    The returned rows show the read state as it was before that update.
    """
    if not FriendsCRUD.are_friends(db, user_id, friend_id):
        raise ForbiddenError("Not friends")

    try:
        messages = db.query(Message).populate_existing().filter(
            _between(user_id, friend_id)
        ).order_by(Message.created_at.asc(), Message.id.asc()).all()

        db.query(Message).filter(
            Message.receiver_id == user_id,
            Message.sender_id == friend_id,
            Message.is_read == False
        ).update({Message.is_read: True}, synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error getting conversation: {e}")
        raise InternalError() from e

    return messages

def get_conversations(db: Session, user_id: int) -> List[ConversationSummary]:
    """
    One summary per friend of user_id: unread count and time of the latest
    message. Most recent conversation first; friends without messages last.
    """
    unread_count = select(func.count(Message.id)).where(
        Message.sender_id == User.id,
        Message.receiver_id == user_id,
        Message.is_read == False
    ).correlate(User).scalar_subquery()
    last_message_time = select(func.max(Message.created_at)).where(
        _between(user_id, User.id)
    ).correlate(User).scalar_subquery()
    last_message_id = select(func.max(Message.id)).where(
        _between(user_id, User.id)
    ).correlate(User).scalar_subquery()

    try:
        rows = db.query(
            User.id,
            User.name,
            User.profile_pic,
            unread_count.label("unread_count"),
            last_message_time.label("last_message_time"),
        ).join(
            Friendship,
            or_(
                and_(Friendship.user1_id == user_id, User.id == Friendship.user2_id),
                and_(Friendship.user2_id == user_id, User.id == Friendship.user1_id)
            )
        ).order_by(
            last_message_time.is_(None),
            last_message_time.desc(),
            last_message_id.desc(),
        ).all()
    except SQLAlchemyError as e:
        logger.error(f"Error getting conversations: {e}")
        raise InternalError() from e

    return [
        ConversationSummary(
            friend_id=row.id,
            name=row.name,
            profile_pic=row.profile_pic,
            unread_count=row.unread_count or 0,
            last_message_time=row.last_message_time,
        )
        for row in rows
    ]

def delete_message(db: Session, message_id: int, requester_id: int) -> None:
    """Delete a message; only its sender may do so."""
    try:
        deleted = db.query(Message).filter(
            Message.id == message_id,
            Message.sender_id == requester_id
        ).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error deleting message {message_id}: {e}")
        raise InternalError() from e

    if not deleted:
        raise NotFoundError("Message not found or not yours")
