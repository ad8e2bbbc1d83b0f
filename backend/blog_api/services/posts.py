"""
Post repository operations and read projections.

Writes run inside one unit of work (database.atomic) together with the
category reconciliation; reads reshape stored rows into the list and detail
response shapes.
"""

import logging
from typing import List

from sqlalchemy.orm import Session, selectinload, joinedload

from blog_api.database import atomic
from blog_api.errors import NotFoundError
from blog_api.models import Post, PostCategory
from blog_api.schemas import PostWrite
from blog_api.services.html_sanitizer import sanitize_html
from blog_api.services.post_categories import reconcile_post_categories

logger = logging.getLogger(__name__)

POST_NOT_FOUND = "post not found"


# === Writes ===

def create_post(db: Session, data: PostWrite) -> Post:
    """
    Create a post and link it to data.category_ids.
    All or nothing: a bad category id leaves no post row behind.
    """
    with atomic(db, "create post", failure_message="failed to create post"):
        post = Post(
            title=data.title,
            content=data.content,
            cover_image_url=data.cover_image_url,
        )
        db.add(post)
        db.flush()

        reconcile_post_categories(db, post, data.category_ids)
        db.refresh(post)

    logger.info(f"Post created: {post.id} ({post.title!r})")
    return post


def update_post(db: Session, post_id: str, data: PostWrite) -> Post:
    """
    Update scalar fields and replace the category links of a post.

    Raises:
        NotFoundError: post_id does not exist, or was deleted before the flush
        AssociationReferenceError: a category id does not exist
        PersistenceError: any other storage failure
    """
    with atomic(
        db,
        f"update post {post_id}",
        not_found_message=POST_NOT_FOUND,
        failure_message="failed to update post",
    ):
        # .one() raises NoResultFound, translated to NotFoundError by atomic()
        post = (
            db.query(Post)
            .filter(Post.id == post_id)
            .with_for_update()
            .one()
        )

        post.title = data.title
        post.content = data.content
        post.cover_image_url = data.cover_image_url

        reconcile_post_categories(db, post, data.category_ids)
        db.refresh(post)

    logger.info(f"Post updated: {post.id}")
    return post


def delete_post(db: Session, post_id: str) -> str:
    """
    Delete a post and all of its category links.

    Returns:
        Title of the deleted post
    """
    with atomic(
        db,
        f"delete post {post_id}",
        not_found_message=POST_NOT_FOUND,
        failure_message="failed to delete post",
    ):
        post = (
            db.query(Post)
            .filter(Post.id == post_id)
            .with_for_update()
            .one()
        )
        title = post.title

        db.query(PostCategory).filter(PostCategory.post_id == post_id).delete(
            synchronize_session="fetch"
        )
        deleted = db.query(Post).filter(Post.id == post_id).delete(
            synchronize_session="fetch"
        )
        if not deleted:
            # Gone since the lookup
            raise NotFoundError(POST_NOT_FOUND)

    logger.info(f"Post deleted: {post_id} ({title!r})")
    return title


# === Read projections ===

def _category_links(post: Post) -> List[dict]:
    links = sorted(post.categories, key=lambda link: (link.category.name, link.category.id))
    return [
        {"category": {"id": link.category.id, "name": link.category.name}}
        for link in links
    ]


def to_list_item(post: Post) -> dict:
    """List shape: no cover image, no updatedAt."""
    return {
        "id": post.id,
        "title": post.title,
        "content": post.content,
        "created_at": post.created_at,
        "categories": _category_links(post),
    }


def to_detail(post: Post) -> dict:
    """Detail shape: every scalar field plus the sanitized content."""
    return {
        "id": post.id,
        "title": post.title,
        "content": post.content,
        "safe_content": sanitize_html(post.content),
        "cover_image_url": post.cover_image_url,
        "created_at": post.created_at,
        "updated_at": post.updated_at,
        "categories": _category_links(post),
    }


def _with_categories(query):
    return query.options(
        selectinload(Post.categories).joinedload(PostCategory.category)
    )


def list_posts(db: Session) -> List[dict]:
    """All posts, newest first, in the list shape."""
    posts = (
        _with_categories(db.query(Post))
        .order_by(Post.created_at.desc(), Post.id)
        .all()
    )
    return [to_list_item(post) for post in posts]


def get_post(db: Session, post_id: str) -> dict:
    """
    One post in the detail shape.

    Raises:
        NotFoundError: post_id does not exist
    """
    post = _with_categories(db.query(Post)).filter(Post.id == post_id).first()
    if not post:
        raise NotFoundError(POST_NOT_FOUND)

    return to_detail(post)
