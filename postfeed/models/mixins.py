"""Mixins for SQLAlchemy models."""

from sqlalchemy import Column, DateTime, func


class CreatedAtMixin:
    """Mixin to add a created_at column to rows that are never updated."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
