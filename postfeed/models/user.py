"""User model."""

from sqlalchemy import Column, Integer, String

from postfeed.database import Base
from postfeed.models.mixins import CreatedAtMixin


class User(Base, CreatedAtMixin):
    """Registered account; email is stored normalized (trimmed, lower-case)."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
