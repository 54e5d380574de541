# API Routers
from cafe_api.routers import auth, profile, cafes, reviews, friends, messages, notifications

__all__ = ["auth", "profile", "cafes", "reviews", "friends", "messages", "notifications"]
