"""SQLAlchemy models."""

from postfeed.models.post import Post, PostTag
from postfeed.models.user import User

__all__ = [
    "User",
    "Post",
    "PostTag",
]
