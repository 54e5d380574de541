from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

class ReviewPatch(BaseModel):
    """Fields a review author may change; None leaves the stored value."""
    text: Optional[str] = None
    rating: Optional[int] = None
    photos: Optional[List[str]] = None

class Review(BaseModel):
    id: int
    user_id: int
    cafe_id: int
    text: str
    rating: int
    photo: List[str] = []
    created_at: Optional[datetime] = None

class CafeReview(Review):
    """Review as listed on a café page"""
    username: Optional[str] = None
    user_profile_pic: Optional[str] = None
    likes: int = 0

class UserReview(Review):
    """Review as listed on a profile"""
    cafe_name: Optional[str] = None

class UserReviewsResponse(BaseModel):
    reviews: List[UserReview]

class ReviewMutationResponse(BaseModel):
    message: str
    review: Review

class LikeCountResponse(BaseModel):
    message: str
    likes: int

class Liker(BaseModel):
    id: int
    name: str
    profile_pic: Optional[str] = None
    created_at: Optional[datetime] = None

class LikersResponse(BaseModel):
    likes: List[Liker]
