from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import Optional, Dict, Any
from cafe_api.exceptions import InvalidArgumentError, UnauthorizedError, NotFoundError, ConflictError, InternalError
from cafe_api.models import User
from cafe_api.security import hash_password, verify_password
from cafe_api.utils.logger import get_logger

logger = get_logger(__name__)

PROFILE_FIELDS = ("name", "bio", "location", "contact")

def get_user(db: Session, user_id: int) -> Optional[User]:
    """Get a user by ID."""
    try:
        return db.query(User).filter(User.id == user_id).first()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching user {user_id}: {e}")
        raise InternalError() from e

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get a user by email."""
    try:
        return db.query(User).filter(User.email == email).first()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching user by email: {e}")
        raise InternalError() from e

def get_user_or_404(db: Session, user_id: int) -> User:
    user = get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user

def register_user(db: Session, name: Optional[str], email: Optional[str], password: Optional[str], rounds: int = 10) -> User:
    """
    Create a new account.

    Raises:
        InvalidArgumentError: a field is missing
        ConflictError: the email is already registered
    """
    if not name or not name.strip() or not email or not password:
        raise InvalidArgumentError("name, email and password required")

    if get_user_by_email(db, email):
        raise ConflictError("User already exists.")

    db_user = User(name=name.strip(), email=email, password=hash_password(password, rounds))
    try:
        db.add(db_user)
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        db.rollback()
        raise ConflictError("User already exists.")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error registering user: {e}")
        raise InternalError() from e

    db.refresh(db_user)
    logger.info(f"Registered user {db_user.id}")
    return db_user

def authenticate_user(db: Session, email: Optional[str], password: Optional[str]) -> User:
    """Check credentials and return the matching user."""
    if not email or not password:
        raise InvalidArgumentError("Email and password are required.")

    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password):
        raise UnauthorizedError("Invalid credentials.")
    return user

def update_profile(db: Session, user_id: int, update_data: Dict[str, Any]) -> User:
    """Update the editable profile fields present in update_data."""
    user = get_user_or_404(db, user_id)

    if "name" in update_data and not (update_data["name"] or "").strip():
        raise InvalidArgumentError("Name cannot be empty")

    for field in PROFILE_FIELDS:
        if field in update_data:
            setattr(user, field, update_data[field])

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating profile for user {user_id}: {e}")
        raise InternalError() from e

    db.refresh(user)
    return user

def set_profile_pic(db: Session, user_id: int, url: str) -> User:
    """Point the user's profile picture at a stored blob URL."""
    user = get_user_or_404(db, user_id)
    user.profile_pic = url
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error saving profile picture for user {user_id}: {e}")
        raise InternalError() from e

    db.refresh(user)
    return user
