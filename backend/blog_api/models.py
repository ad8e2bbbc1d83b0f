"""
ORM models.
Posts and categories linked many-to-many through explicit join rows.
"""
import uuid
from datetime import datetime

from sqlalchemy import Column, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from blog_api.database import Base


def generate_id() -> str:
    return str(uuid.uuid4())


class Category(Base):
    __tablename__ = "categories"

    id = Column(Text, primary_key=True, default=generate_id)
    name = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    post_links = relationship("PostCategory", back_populates="category", passive_deletes=True)


class Post(Base):
    __tablename__ = "posts"

    id = Column(Text, primary_key=True, default=generate_id)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False, default="")
    cover_image_url = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    # Written only by services.post_categories; read through the projections
    categories = relationship(
        "PostCategory",
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class PostCategory(Base):
    """Association row. Identity is the (post_id, category_id) pair."""
    __tablename__ = "post_categories"

    post_id = Column(Text, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    category_id = Column(Text, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True)

    # Relationships
    post = relationship("Post", back_populates="categories")
    category = relationship("Category", back_populates="post_links")


Index("idx_post_categories_category", PostCategory.category_id)
Index("idx_posts_created", Post.created_at.desc())
