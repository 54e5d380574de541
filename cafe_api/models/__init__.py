from cafe_api.database import Base
from cafe_api.models.user import User
from cafe_api.models.cafe import Cafe
from cafe_api.models.review import Review
from cafe_api.models.like import Like
from cafe_api.models.friendship import Friendship
from cafe_api.models.message import Message
from cafe_api.models.notification import Notification

__all__ = [
    "Base", "User", "Cafe", "Review", "Like", "Friendship", "Message", "Notification"
]
