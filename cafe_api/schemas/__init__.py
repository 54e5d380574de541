from cafe_api.schemas.user import (
    UserCreate, LoginRequest, ProfileUpdate, UserResponse, CurrentUser,
    RegisterResponse, LoginResponse, ProfileResponse, ProfileUpdateResponse, ProfilePicResponse
)
from cafe_api.schemas.cafe import Cafe
from cafe_api.schemas.review import (
    ReviewPatch, Review, CafeReview, UserReview, UserReviewsResponse, ReviewMutationResponse,
    LikeCountResponse, Liker, LikersResponse
)
from cafe_api.schemas.friends import (
    FriendAddRequest, FriendshipResponse, FriendAddResponse, FriendCheckResponse, StatusMessage
)
from cafe_api.schemas.message import MessageCreate, Message, ConversationSummary
from cafe_api.schemas.notification import Notification

__all__ = [
    "UserCreate", "LoginRequest", "ProfileUpdate", "UserResponse", "CurrentUser",
    "RegisterResponse", "LoginResponse", "ProfileResponse", "ProfileUpdateResponse", "ProfilePicResponse",
    "Cafe",
    "ReviewPatch", "Review", "CafeReview", "UserReview", "UserReviewsResponse", "ReviewMutationResponse",
    "LikeCountResponse", "Liker", "LikersResponse",
    "FriendAddRequest", "FriendshipResponse", "FriendAddResponse", "FriendCheckResponse", "StatusMessage",
    "MessageCreate", "Message", "ConversationSummary",
    "Notification",
]
