from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session
from typing import Optional
from cafe_api.database import get_db
from cafe_api.auth import get_current_user
from cafe_api.config import settings
from cafe_api import crud
from cafe_api.dependencies import get_authenticator, get_blob_store
from cafe_api.exceptions import ServiceError, InvalidArgumentError, InternalError
from cafe_api.schemas.user import (
    UserCreate, LoginRequest, ProfileUpdate, UserResponse, CurrentUser,
    RegisterResponse, LoginResponse, ProfileUpdateResponse, ProfilePicResponse
)
from cafe_api.security import Authenticator
from cafe_api.services.blob_store import LocalBlobStore
from cafe_api.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(user: UserCreate, db: Session = Depends(get_db)):
    """
    Create an account.

    Returns 400 when a field is missing and 409 when the email is taken.
    """
    try:
        db_user = crud.register_user(db, user.name, user.email, user.password, settings.BCRYPT_ROUNDS)
        return RegisterResponse(
            message="User registered successfully!",
            user=UserResponse.model_validate(db_user)
        )
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Registration error: {e}")
        raise InternalError()

@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
    authenticator: Authenticator = Depends(get_authenticator)
):
    """Exchange email and password for a bearer token"""
    try:
        user = crud.authenticate_user(db, credentials.email, credentials.password)
        token = authenticator.issue_token(user.id, user.name, user.email)
        logger.info(f"User {user.id} logged in")
        return LoginResponse(
            message="Login successful!",
            token=token,
            user=UserResponse.model_validate(user)
        )
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Login error: {e}")
        raise InternalError()

@router.get("/me", response_model=UserResponse)
async def me(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        return UserResponse.model_validate(crud.get_user_or_404(db, current_user.id))
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Fetch current user error: {e}")
        raise InternalError()

@router.put("/update", response_model=ProfileUpdateResponse)
async def update_profile(
    update: ProfileUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update name, bio, location or contact. Omitted fields keep their values."""
    try:
        user = crud.update_profile(db, current_user.id, update.model_dump(exclude_unset=True))
        return ProfileUpdateResponse(
            message="Profile updated successfully.",
            user=UserResponse.model_validate(user)
        )
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Update profile error: {e}")
        raise InternalError()

@router.post("/upload-pic", response_model=ProfilePicResponse)
async def upload_profile_pic(
    profile_pic: Optional[UploadFile] = File(None),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    blob_store: LocalBlobStore = Depends(get_blob_store)
):
    try:
        if profile_pic is None or not profile_pic.filename:
            raise InvalidArgumentError("No file uploaded.")
        url = await blob_store.save(profile_pic, prefix="profile")
        try:
            user = crud.set_profile_pic(db, current_user.id, url)
        except Exception:
            blob_store.discard([url])
            raise
        return ProfilePicResponse(
            message="Profile picture updated",
            url=url,
            user=UserResponse.model_validate(user)
        )
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Upload profile picture error: {e}")
        raise InternalError()
