"""Pydantic schemas for API requests and responses."""

from postfeed.schemas.auth import (
    AuthResponse,
    LoginRequest,
    SignupRequest,
    TokenIdentity,
    UserResponse,
)
from postfeed.schemas.envelope import ApiResponse, FieldError
from postfeed.schemas.post import PostCreate, PostFilters, PostPage, PostResponse

__all__ = [
    "ApiResponse",
    "FieldError",
    "SignupRequest",
    "LoginRequest",
    "UserResponse",
    "AuthResponse",
    "TokenIdentity",
    "PostCreate",
    "PostFilters",
    "PostPage",
    "PostResponse",
]
