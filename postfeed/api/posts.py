"""Post API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status

from postfeed.api.dependencies import get_current_identity, get_post_filters, get_post_service
from postfeed.rate_limit import api_rate_limit
from postfeed.schemas.auth import TokenIdentity
from postfeed.schemas.envelope import ApiResponse
from postfeed.schemas.post import PostFilters, PostPage, PostResponse
from postfeed.services.post_service import PostService

router = APIRouter(prefix="/api/posts", tags=["posts"])


@router.post("", response_model=ApiResponse[PostResponse], status_code=status.HTTP_201_CREATED)
@api_rate_limit
async def create_post(
    request: Request,
    identity: Annotated[TokenIdentity, Depends(get_current_identity)],
    service: Annotated[PostService, Depends(get_post_service)],
    user_id: Annotated[str | None, Form(alias="userId")] = None,
    post_name: Annotated[str | None, Form(alias="postName")] = None,
    description: Annotated[str | None, Form()] = None,
    tags: Annotated[list[str] | None, Form()] = None,
    bracket_tags: Annotated[list[str] | None, Form(alias="tags[]")] = None,
    image: Annotated[UploadFile | None, File(description="JPEG or PNG, up to 5MB")] = None,
):
    """Create a post for the authenticated user, with an optional image.

    Note: This endpoint must remain async because UploadFile.read() is async.
    """
    form = {
        "userId": user_id,
        "postName": post_name,
        "description": description,
        "tags": (tags or []) + (bracket_tags or []),
    }
    post = await service.create_post(identity.user_id, form, image)

    return ApiResponse(message="Post created successfully", data=PostResponse.from_post(post))


@router.get("", response_model=ApiResponse[PostPage])
@api_rate_limit
def list_posts(
    request: Request,
    filters: Annotated[PostFilters, Depends(get_post_filters)],
    service: Annotated[PostService, Depends(get_post_service)],
):
    """List posts, newest first, with search, date, tag filters and pagination."""
    return ApiResponse(message="Posts fetched successfully", data=service.list_posts(filters))
