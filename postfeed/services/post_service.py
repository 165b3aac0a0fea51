"""Post service for creating posts and querying the feed."""

import logging
import math
from datetime import UTC, date, datetime, time, timedelta

from fastapi import UploadFile
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import or_
from sqlalchemy.orm import Query, Session, selectinload

from postfeed.errors import AuthorizationError, ValidationError
from postfeed.models.post import Post, PostTag
from postfeed.schemas.post import PostCreate, PostFilters, PostPage, PostResponse
from postfeed.services.image_storage import ImageStorage

logger = logging.getLogger(__name__)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=UTC)


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class PostService:
    """Service for post creation and the filtered, paginated feed."""

    def __init__(self, db: Session, storage: ImageStorage | None = None):
        self.db = db
        self.storage = storage

    async def create_post(
        self,
        caller_id: int,
        form: dict,
        image: UploadFile | None = None,
    ) -> Post:
        """
        Create a post owned by the caller.

        Checks run in order: ownership, field validation, image type and size.
        Nothing is written unless all of them pass. The image is stored before
        the post row is committed.
        """
        owner_id = form.get("userId")
        if isinstance(owner_id, str) and owner_id.strip() and owner_id.strip() != str(caller_id):
            logger.warning(f"Unauthorized post attempt: caller {caller_id} as owner {owner_id!r}")
            raise AuthorizationError("You can only create posts for your own account")

        try:
            data = PostCreate.model_validate({k: v for k, v in form.items() if v is not None})
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        content = None
        if image is not None and image.filename:
            if self.storage is None:
                raise RuntimeError("Image storage is not configured")
            content = await self.storage.validate(image)

        image_path = None
        if content is not None:
            image_path = await self.storage.save(image, content)

        post = Post(
            user_id=data.user_id,
            name=data.post_name,
            description=data.description,
            image_path=image_path,
            upload_time=datetime.now(UTC),
            tag_links=[PostTag(tag=tag) for tag in data.tags],
        )
        self.db.add(post)
        self.db.commit()
        self.db.refresh(post)

        logger.info(f"Post created by user: {post.user_id} with image: {image_path}")
        return post

    def filtered_query(self, filters: PostFilters) -> Query:
        """Build the feed query for the given filters, without ordering or paging."""
        query = self.db.query(Post)

        if filters.search_text:
            pattern = f"%{escape_like(filters.search_text)}%"
            query = query.filter(
                or_(
                    Post.name.ilike(pattern, escape="\\"),
                    Post.description.ilike(pattern, escape="\\"),
                )
            )

        if filters.start_date:
            query = query.filter(Post.upload_time >= start_of_day(filters.start_date))
        if filters.end_date:
            # endDate is inclusive of the whole day
            query = query.filter(
                Post.upload_time < start_of_day(filters.end_date + timedelta(days=1))
            )

        if filters.tags:
            query = query.filter(Post.tag_links.any(PostTag.tag.in_(filters.tags)))

        return query

    def list_posts(self, filters: PostFilters) -> PostPage:
        """Return one page of posts, newest first."""
        query = self.filtered_query(filters)
        total = query.count()

        posts = (
            query.options(selectinload(Post.tag_links))
            .order_by(Post.upload_time.desc(), Post.id.desc())
            .offset(filters.offset)
            .limit(filters.limit)
            .all()
        )

        logger.info(f"Fetched posts - Page: {filters.page}, Limit: {filters.limit}, Total: {total}")
        return PostPage(
            posts=[PostResponse.from_post(post) for post in posts],
            total=total,
            page=filters.page,
            pages=math.ceil(total / filters.limit),
            limit=filters.limit,
        )
