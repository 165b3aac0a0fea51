"""Post and PostTag models."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from postfeed.database import Base
from postfeed.models.mixins import CreatedAtMixin


class Post(Base, CreatedAtMixin):
    """Content post with optional image attachment."""

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    image_path = Column(String(512), nullable=True)  # "/uploads/image-....png"
    upload_time = Column(DateTime(timezone=True), nullable=False, index=True)

    # Relationships
    user = relationship("User", backref="posts")
    tag_links = relationship(
        "PostTag",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="PostTag.id",
    )

    @property
    def tags(self) -> list[str]:
        """Tags in the order they were submitted."""
        return [link.tag for link in self.tag_links]


class PostTag(Base):
    """A single tag attached to a post."""

    __tablename__ = "post_tags"
    __table_args__ = (UniqueConstraint("post_id", "tag", name="uq_post_tags_post_tag"),)

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tag = Column(String(100), nullable=False, index=True)

    post = relationship("Post", back_populates="tag_links")
