from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from cafe_api.database import get_db
from cafe_api.auth import get_current_user
from cafe_api import crud
from cafe_api.exceptions import ServiceError, InternalError
from cafe_api.schemas.friends import StatusMessage
from cafe_api.schemas.message import MessageCreate, Message, ConversationSummary
from cafe_api.schemas.user import CurrentUser
from cafe_api.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/messages", tags=["messages"])

@router.post("", response_model=Message, status_code=201)
async def send_message(
    body: MessageCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Send a direct message to a friend"""
    try:
        message = crud.send_message(db, current_user.id, body.receiver_id, body.text)
        return Message.model_validate(message)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Error in send_message: {e}")
        raise InternalError()

@router.get("/conversation/{friend_id}", response_model=List[Message])
async def get_conversation(
    friend_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Chat history with a friend, oldest first. Marks the friend's messages as read."""
    try:
        messages = crud.get_conversation(db, current_user.id, friend_id)
        return [Message.model_validate(m) for m in messages]
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Error in get_conversation: {e}")
        raise InternalError()

@router.get("", response_model=List[ConversationSummary])
async def get_conversations(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Conversation list: every friend with unread count and last message time"""
    try:
        return crud.get_conversations(db, current_user.id)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Error in get_conversations: {e}")
        raise InternalError()

@router.delete("/{message_id}", response_model=StatusMessage)
async def delete_message(
    message_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        crud.delete_message(db, message_id, current_user.id)
        return StatusMessage(message="Message deleted")
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Error in delete_message: {e}")
        raise InternalError()
