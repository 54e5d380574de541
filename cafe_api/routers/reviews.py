from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session
from typing import List, Optional
from cafe_api.database import get_db
from cafe_api.auth import get_current_user
from cafe_api.config import settings
from cafe_api import crud
from cafe_api.dependencies import get_blob_store, get_notification_outbox
from cafe_api.exceptions import ServiceError, InvalidArgumentError, InternalError
from cafe_api.schemas.review import (
    ReviewPatch, CafeReview, UserReview, UserReviewsResponse, ReviewMutationResponse,
    LikeCountResponse, LikersResponse
)
from cafe_api.schemas.user import CurrentUser
from cafe_api.services.blob_store import LocalBlobStore
from cafe_api.services.notification_outbox import NotificationOutbox
from cafe_api.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/reviews", tags=["reviews"])


async def _store_photos(blob_store: LocalBlobStore, photos: Optional[List[UploadFile]]) -> List[str]:
    photos = [p for p in (photos or []) if p.filename]
    if len(photos) > settings.MAX_REVIEW_PHOTOS:
        raise InvalidArgumentError(f"At most {settings.MAX_REVIEW_PHOTOS} photos are allowed")
    urls: List[str] = []
    try:
        for photo in photos:
            urls.append(await blob_store.save(photo, prefix="review"))
    except Exception:
        blob_store.discard(urls)
        raise
    return urls


@router.post("", response_model=ReviewMutationResponse, status_code=201)
async def create_review(
    cafe_id: Optional[int] = Form(None),
    text: Optional[str] = Form(None),
    rating: Optional[int] = Form(None),
    photos: Optional[List[UploadFile]] = File(None),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    blob_store: LocalBlobStore = Depends(get_blob_store)
):
    """Post a review for a café with up to MAX_REVIEW_PHOTOS photos"""
    try:
        crud.require_review_fields(db, cafe_id, text, rating)
        photo_urls = await _store_photos(blob_store, photos)
        try:
            review = crud.create_review(db, current_user.id, cafe_id, text, rating, photo_urls)
        except Exception:
            blob_store.discard(photo_urls)
            raise
        return ReviewMutationResponse(
            message="Review posted successfully",
            review=crud.review_to_schema(review)
        )
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Add review error: {e}")
        raise InternalError()


@router.put("/{review_id}", response_model=ReviewMutationResponse)
async def update_review(
    review_id: int,
    text: Optional[str] = Form(None),
    rating: Optional[int] = Form(None),
    photos: Optional[List[UploadFile]] = File(None),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    blob_store: LocalBlobStore = Depends(get_blob_store)
):
    """Edit your own review. Uploaded photos replace the stored ones."""
    try:
        crud.require_review_author(db, review_id, current_user.id)
        photo_urls = await _store_photos(blob_store, photos)
        patch = ReviewPatch(text=text, rating=rating, photos=photo_urls or None)
        try:
            review = crud.update_review(db, review_id, current_user.id, patch)
        except Exception:
            blob_store.discard(photo_urls)
            raise
        return ReviewMutationResponse(
            message="Review updated successfully",
            review=crud.review_to_schema(review)
        )
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Update review error: {e}")
        raise InternalError()


@router.delete("/{review_id}")
async def delete_review(
    review_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        crud.delete_review(db, review_id, current_user.id)
        return {"message": "Review deleted successfully."}
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Delete review error: {e}")
        raise InternalError()


@router.get("/cafe/{cafe_id}", response_model=List[CafeReview])
async def get_cafe_reviews(cafe_id: int, db: Session = Depends(get_db)):
    """Public list of a café's reviews with author info and like counts"""
    try:
        return crud.get_cafe_reviews(db, cafe_id)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Fetch cafe reviews error: {e}")
        raise InternalError()


@router.get("/user/{user_id}", response_model=UserReviewsResponse)
async def get_user_reviews(user_id: int, db: Session = Depends(get_db)):
    try:
        return UserReviewsResponse(reviews=crud.get_user_reviews(db, user_id))
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Fetch user reviews error: {e}")
        raise InternalError()


@router.get("/my", response_model=List[UserReview])
async def get_my_reviews(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        return crud.get_user_reviews(db, current_user.id)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Fetch my reviews error: {e}")
        raise InternalError()


@router.post("/{review_id}/like", response_model=LikeCountResponse)
async def like_review(
    review_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    outbox: NotificationOutbox = Depends(get_notification_outbox)
):
    """Like a review; its author is notified unless they liked their own review"""
    try:
        likes = crud.like_review(db, review_id, current_user.id, outbox)
        return LikeCountResponse(message="Liked", likes=likes)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Like error: {e}")
        raise InternalError()


@router.delete("/{review_id}/like", response_model=LikeCountResponse)
async def unlike_review(
    review_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        likes = crud.unlike_review(db, review_id, current_user.id)
        return LikeCountResponse(message="Unliked", likes=likes)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Unlike error: {e}")
        raise InternalError()


@router.get("/{review_id}/likes", response_model=LikersResponse)
async def get_review_likes(review_id: int, db: Session = Depends(get_db)):
    """Who liked a review, most recent first"""
    try:
        return LikersResponse(likes=crud.get_likers(db, review_id))
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Likes fetch error: {e}")
        raise InternalError()
