from sqlalchemy.orm import Session
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from cafe_api.exceptions import InvalidArgumentError, ForbiddenError, NotFoundError, ConflictError, InternalError
from cafe_api.models import Cafe, Like, Review, User
from cafe_api.schemas.review import ReviewPatch, Review as ReviewSchema, CafeReview, UserReview, Liker
from cafe_api.utils.logger import get_logger

if TYPE_CHECKING:
    from cafe_api.services.notification_outbox import NotificationOutbox

logger = get_logger(__name__)

def review_to_schema(review: Review) -> ReviewSchema:
    return ReviewSchema(**_review_fields(review))

def _review_fields(review: Review) -> Dict[str, Any]:
    return {
        "id": review.id,
        "user_id": review.user_id,
        "cafe_id": review.cafe_id,
        "text": review.text,
        "rating": review.rating,
        "photo": review.photos,
        "created_at": review.created_at,
    }

def _raise_missing_or_forbidden(db: Session, review_id: int, action: str) -> None:
    """Explain why an owner-filtered statement matched no row."""
    if db.query(Review.id).filter(Review.id == review_id).first():
        raise ForbiddenError(f"Not authorized to {action} this review.")
    raise NotFoundError("Review not found")

def require_review_author(db: Session, review_id: int, requester_id: int) -> None:
    """Fail before any upload is stored when the requester cannot edit the review."""
    try:
        owned = db.query(Review.id).filter(
            Review.id == review_id,
            Review.user_id == requester_id
        ).first()
    except SQLAlchemyError as e:
        logger.error(f"Review lookup error: {e}")
        raise InternalError() from e
    if not owned:
        _raise_missing_or_forbidden(db, review_id, "edit")

def count_likes(db: Session, review_id: int) -> int:
    return db.query(func.count(Like.id)).filter(Like.review_id == review_id).scalar() or 0

def require_review_fields(db: Session, cafe_id: Optional[int], text: Optional[str], rating: Optional[int]) -> None:
    """Validate a new review before anything is stored (photos included)."""
    if not cafe_id or not text or not text.strip() or rating is None:
        raise InvalidArgumentError("All fields are required.")
    if not db.query(Cafe.id).filter(Cafe.id == cafe_id).first():
        raise NotFoundError("Cafe not found")

def create_review(
    db: Session,
    author_id: int,
    cafe_id: Optional[int],
    text: Optional[str],
    rating: Optional[int],
    photo_urls: Optional[List[str]] = None,
) -> Review:
    """Create a review; photo URLs are stored as a JSON array."""
    require_review_fields(db, cafe_id, text, rating)

    review = Review(
        user_id=author_id,
        cafe_id=cafe_id,
        text=text,
        rating=rating,
        photo=Review.serialize_photos(photo_urls),
    )
    try:
        db.add(review)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Review insert error: {e}")
        raise InternalError() from e

    db.refresh(review)
    logger.info(f"User {author_id} reviewed cafe {cafe_id}")
    return review

def update_review(db: Session, review_id: int, requester_id: int, patch: ReviewPatch) -> Review:
    """
    Apply patch to a review in a single statement that only matches rows
    authored by requester_id. Blank text and missing values keep what is stored;
    photos are replaced only when new ones are supplied.
    """
    values: Dict[Any, Any] = {}
    if patch.text and patch.text.strip():
        values[Review.text] = patch.text
    if patch.rating is not None:
        values[Review.rating] = patch.rating
    if patch.photos:
        values[Review.photo] = Review.serialize_photos(patch.photos)

    try:
        if values:
            updated = db.query(Review).filter(
                Review.id == review_id,
                Review.user_id == requester_id
            ).update(values, synchronize_session=False)
            db.commit()
        else:
            updated = db.query(Review.id).filter(
                Review.id == review_id,
                Review.user_id == requester_id
            ).count()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Update review error: {e}")
        raise InternalError() from e

    if not updated:
        _raise_missing_or_forbidden(db, review_id, "edit")

    return db.query(Review).populate_existing().filter(Review.id == review_id).first()

def delete_review(db: Session, review_id: int, requester_id: int) -> None:
    """Delete a review in a single statement matching both ID and author."""
    try:
        deleted = db.query(Review).filter(
            Review.id == review_id,
            Review.user_id == requester_id
        ).delete(synchronize_session=False)
        if deleted:
            # Covers stores that do not enforce ON DELETE CASCADE
            db.query(Like).filter(Like.review_id == review_id).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Delete review error: {e}")
        raise InternalError() from e

    if not deleted:
        _raise_missing_or_forbidden(db, review_id, "delete")

def get_cafe_reviews(db: Session, cafe_id: int) -> List[CafeReview]:
    """Reviews of a café with author info and like counts, newest first."""
    like_count = select(func.count(Like.id)).where(
        Like.review_id == Review.id
    ).correlate(Review).scalar_subquery()

    rows = db.query(Review, User.name, User.profile_pic, like_count.label("likes")).join(
        User, Review.user_id == User.id
    ).filter(
        Review.cafe_id == cafe_id
    ).order_by(Review.created_at.desc(), Review.id.desc()).all()

    return [
        CafeReview(
            **_review_fields(review),
            username=name,
            user_profile_pic=profile_pic,
            likes=likes or 0,
        )
        for review, name, profile_pic, likes in rows
    ]

def get_user_reviews(db: Session, user_id: int) -> List[UserReview]:
    """Reviews written by a user with the café name, newest first."""
    rows = db.query(Review, Cafe.name).outerjoin(
        Cafe, Review.cafe_id == Cafe.id
    ).filter(
        Review.user_id == user_id
    ).order_by(Review.created_at.desc(), Review.id.desc()).all()

    return [UserReview(**_review_fields(review), cafe_name=cafe_name) for review, cafe_name in rows]

def like_review(db: Session, review_id: int, user_id: int, outbox: "NotificationOutbox") -> int:
    """
    Record that user_id likes the review and return the new like count.
    The review's author is notified unless they liked their own review.

    Raises:
        NotFoundError: the review does not exist
        ConflictError: the user already likes the review
    """
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise NotFoundError("Review not found")

    try:
        db.add(Like(review_id=review_id, user_id=user_id))
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Already liked")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Like error: {e}")
        raise InternalError() from e

    if review.user_id != user_id:
        liker = db.query(User.name).filter(User.id == user_id).first()
        liker_name = liker.name if liker and liker.name else "Someone"
        outbox.enqueue(review.user_id, f"{liker_name} liked your review.")

    return count_likes(db, review_id)

def unlike_review(db: Session, review_id: int, user_id: int) -> int:
    """Remove the like if present; returns the resulting like count."""
    try:
        db.query(Like).filter(
            Like.review_id == review_id,
            Like.user_id == user_id
        ).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Unlike error: {e}")
        raise InternalError() from e

    return count_likes(db, review_id)

def get_likers(db: Session, review_id: int) -> List[Liker]:
    """Users who liked the review, most recent like first."""
    rows = db.query(User.id, User.name, User.profile_pic, Like.created_at).join(
        Like, Like.user_id == User.id
    ).filter(
        Like.review_id == review_id
    ).order_by(Like.created_at.desc(), Like.id.desc()).all()

    return [
        Liker(id=row.id, name=row.name, profile_pic=row.profile_pic, created_at=row.created_at)
        for row in rows
    ]
