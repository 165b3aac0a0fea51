"""FastAPI dependencies for authentication, filters and services."""

from datetime import date
from typing import Annotated

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from postfeed.database import get_db
from postfeed.errors import AuthenticationError, ValidationError
from postfeed.schemas.auth import TokenIdentity
from postfeed.schemas.post import PostFilters
from postfeed.services.auth import decode_access_token
from postfeed.services.image_storage import ImageStorage, get_image_storage
from postfeed.services.post_service import PostService

# auto_error=False so a missing header is reported as 401 through our own envelope
security = HTTPBearer(auto_error=False)


def get_current_identity(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> TokenIdentity:
    """Verify the bearer token and attach the caller's identity to the request.

    The user record is not re-read; the token payload is trusted once its
    signature and expiry check out.
    """
    if credentials is None:
        raise AuthenticationError("Authentication required")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise AuthenticationError("Invalid or expired token")

    user_id = payload.get("sub")
    if user_id is None or not str(user_id).isdigit():
        raise AuthenticationError("Invalid or expired token")

    identity = TokenIdentity(user_id=int(user_id))
    request.state.identity = identity
    return identity


def get_post_filters(
    search_text: Annotated[str | None, Query(alias="searchText")] = None,
    start_date: Annotated[date | None, Query(alias="startDate")] = None,
    end_date: Annotated[date | None, Query(alias="endDate")] = None,
    tags: Annotated[str | None, Query(description="Comma-separated tags")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> PostFilters:
    """Parse feed query parameters."""
    try:
        return PostFilters(
            search_text=search_text,
            start_date=start_date,
            end_date=end_date,
            tags=tags,
            page=page,
            limit=limit,
        )
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e


def get_post_service(
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[ImageStorage, Depends(get_image_storage)],
) -> PostService:
    """Get post service with dependencies."""
    return PostService(db, storage)
