from sqlalchemy.orm import Session
from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import TYPE_CHECKING, List, Optional
from cafe_api.exceptions import InvalidArgumentError, NotFoundError, ConflictError, InternalError
from cafe_api.models.friendship import Friendship
from cafe_api.models.user import User
from cafe_api.utils.logger import get_logger

if TYPE_CHECKING:
    from cafe_api.services.notification_outbox import NotificationOutbox

logger = get_logger(__name__)

class FriendsCRUD:
    """
    Social graph operations.

    A friendship is one undirected edge stored as (user1_id, user2_id) with
    user1_id < user2_id, so every lookup and delete goes through the
    canonical pair and works the same from either side.
    """

    @staticmethod
    def get_friends_list(db: Session, user_id: int) -> List[User]:
        """Users sharing an edge with user_id, newest friendship first."""
        try:
            return db.query(User).join(
                Friendship,
                or_(
                    and_(Friendship.user1_id == user_id, User.id == Friendship.user2_id),
                    and_(Friendship.user2_id == user_id, User.id == Friendship.user1_id)
                )
            ).order_by(Friendship.created_at.desc(), Friendship.id.desc()).all()
        except SQLAlchemyError as e:
            logger.error(f"Error getting friends list: {e}")
            raise InternalError() from e

    @staticmethod
    def are_friends(db: Session, user_id: int, other_id: int) -> bool:
        """Check if two users share a friendship edge (direction does not matter)"""
        if user_id == other_id:
            return False
        user1_id, user2_id = Friendship.canonical_pair(user_id, other_id)
        try:
            friendship = db.query(Friendship.id).filter(
                Friendship.user1_id == user1_id,
                Friendship.user2_id == user2_id
            ).first()
        except SQLAlchemyError as e:
            logger.error(f"Error checking friendship: {e}")
            raise InternalError() from e
        return friendship is not None

    @staticmethod
    def add_friend(db: Session, user_id: int, friend_id: Optional[int], outbox: "NotificationOutbox") -> Friendship:
        """
        Create the edge between user_id and friend_id and queue a notification
        for the new friend.

        Raises:
            InvalidArgumentError: friend_id missing or equal to user_id
            NotFoundError: friend_id is not a user
            ConflictError: the two users are already friends
        """
        if not friend_id or friend_id == user_id:
            raise InvalidArgumentError("Invalid friend ID")

        friend = db.query(User).filter(User.id == friend_id).first()
        if not friend:
            raise NotFoundError("User not found")
        user = db.query(User).filter(User.id == user_id).first()

        user1_id, user2_id = Friendship.canonical_pair(user_id, friend_id)
        friendship = Friendship(user1_id=user1_id, user2_id=user2_id)
        try:
            db.add(friendship)
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("Already friends")
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error adding friend: {e}")
            raise InternalError() from e

        db.refresh(friendship)
        user_name = user.name if user else "Someone"
        outbox.enqueue(friend_id, f"{user_name} added you as a friend.")
        logger.info(f"User {user_id} added friend {friend_id}")
        return friendship

    @staticmethod
    def remove_friend(db: Session, user_id: int, friend_id: int) -> None:
        """Remove the edge between the two users (unfriend), from either side"""
        user1_id, user2_id = Friendship.canonical_pair(user_id, friend_id)
        try:
            deleted = db.query(Friendship).filter(
                Friendship.user1_id == user1_id,
                Friendship.user2_id == user2_id
            ).delete(synchronize_session=False)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error removing friend: {e}")
            raise InternalError() from e

        if not deleted:
            raise NotFoundError("Friendship not found")
        logger.info(f"User {user_id} removed friend {friend_id}")
