"""Post schemas."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

MAX_TAG_LENGTH = 100


def normalize_tags(values: list[str] | None) -> list[str]:
    """Trim tags, drop blanks and duplicates, keep first-seen order."""
    tags: list[str] = []
    for value in values or []:
        tag = value.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


class PostCreate(BaseModel):
    """Fields of a multipart post submission, after ownership is checked."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: int
    post_name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list)

    @field_validator("post_name", "description", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def default_tags(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, value: list[str]) -> list[str]:
        tags = normalize_tags(value)
        for tag in tags:
            if len(tag) > MAX_TAG_LENGTH:
                raise ValueError(f"Tags must be at most {MAX_TAG_LENGTH} characters")
        return tags


class PostResponse(BaseModel):
    """Post as returned to clients (camelCase keys)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    user_id: int
    post_name: str
    description: str
    tags: list[str]
    image_path: str | None = None
    upload_time: datetime

    @classmethod
    def from_post(cls, post: Any) -> "PostResponse":
        return cls(
            id=post.id,
            user_id=post.user_id,
            post_name=post.name,
            description=post.description,
            tags=post.tags,
            image_path=post.image_path,
            upload_time=post.upload_time,
        )


class PostFilters(BaseModel):
    """Listing filters and pagination for the public feed."""

    search_text: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    tags: list[str] = Field(default_factory=list)
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)

    @field_validator("search_text", mode="before")
    @classmethod
    def blank_search_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        return normalize_tags(value)

    @model_validator(mode="after")
    def check_date_range(self) -> "PostFilters":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("startDate must be on or before endDate")
        return self

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PostPage(BaseModel):
    """One page of the filtered feed."""

    posts: list[PostResponse]
    total: int
    page: int
    pages: int
    limit: int
