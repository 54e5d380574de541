from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from cafe_api.database import get_db
from cafe_api.auth import get_current_user
from cafe_api.crud.friends import FriendsCRUD
from cafe_api.dependencies import get_notification_outbox
from cafe_api.exceptions import ServiceError, InternalError
from cafe_api.schemas.friends import (
    FriendAddRequest, FriendAddResponse, FriendCheckResponse, FriendshipResponse, StatusMessage
)
from cafe_api.schemas.user import CurrentUser, UserResponse
from cafe_api.services.notification_outbox import NotificationOutbox
from cafe_api.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/friends", tags=["friends"])

@router.get("", response_model=List[UserResponse])
async def get_friends_list(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get friends of the current user, most recently added first"""
    try:
        friends = FriendsCRUD.get_friends_list(db, current_user.id)
        return [UserResponse.model_validate(friend) for friend in friends]
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Error in get_friends_list: {e}")
        raise InternalError()

@router.get("/check/{friend_id}", response_model=FriendCheckResponse)
async def check_friend(
    friend_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Check whether the current user and friend_id are friends"""
    try:
        return FriendCheckResponse(is_friend=FriendsCRUD.are_friends(db, current_user.id, friend_id))
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Error in check_friend: {e}")
        raise InternalError()

@router.post("", response_model=FriendAddResponse, status_code=201)
async def add_friend(
    request: FriendAddRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    outbox: NotificationOutbox = Depends(get_notification_outbox)
):
    """Add a friend; the new friend is notified after the response is sent"""
    try:
        friendship = FriendsCRUD.add_friend(db, current_user.id, request.friend_id, outbox)
        return FriendAddResponse(
            message="Friend added",
            friendship=FriendshipResponse.model_validate(friendship)
        )
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Error in add_friend: {e}")
        raise InternalError()

@router.delete("/{friend_id}", response_model=StatusMessage)
async def remove_friend(
    friend_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Remove a friend (unfriend)"""
    try:
        FriendsCRUD.remove_friend(db, current_user.id, friend_id)
        return StatusMessage(message="Friend removed")
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Error in remove_friend: {e}")
        raise InternalError()
