from cafe_api.crud.user import (
    get_user,
    get_user_by_email,
    get_user_or_404,
    register_user,
    authenticate_user,
    update_profile,
    set_profile_pic,
)
from cafe_api.crud.cafe import (
    get_cafes,
    get_cafe,
    create_cafe,
)
from cafe_api.crud.notification import (
    notify,
    get_notifications,
    dismiss_notification,
)
from cafe_api.crud.friends import FriendsCRUD
from cafe_api.crud.message import (
    send_message,
    get_conversation,
    get_conversations,
    delete_message,
)
from cafe_api.crud.review import (
    review_to_schema,
    require_review_fields,
    require_review_author,
    count_likes,
    create_review,
    update_review,
    delete_review,
    get_cafe_reviews,
    get_user_reviews,
    like_review,
    unlike_review,
    get_likers,
)

__all__ = [
    # User operations
    "get_user",
    "get_user_by_email",
    "get_user_or_404",
    "register_user",
    "authenticate_user",
    "update_profile",
    "set_profile_pic",

    # Cafe operations
    "get_cafes",
    "get_cafe",
    "create_cafe",

    # Notification operations
    "notify",
    "get_notifications",
    "dismiss_notification",

    # Friends operations
    "FriendsCRUD",

    # Message operations
    "send_message",
    "get_conversation",
    "get_conversations",
    "delete_message",

    # Review and like operations
    "review_to_schema",
    "require_review_fields",
    "require_review_author",
    "count_likes",
    "create_review",
    "update_review",
    "delete_review",
    "get_cafe_reviews",
    "get_user_reviews",
    "like_review",
    "unlike_review",
    "get_likers",
]
