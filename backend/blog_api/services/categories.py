"""
Category repository.
CRUD for categories; deleting one drops its post links, never the posts.
"""

import logging
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from blog_api.database import atomic
from blog_api.errors import NotFoundError
from blog_api.models import Category, PostCategory
from blog_api.schemas import CategoryWrite

logger = logging.getLogger(__name__)

CATEGORY_NOT_FOUND = "category not found"


def _post_count(db: Session, category_id: str) -> int:
    return (
        db.query(func.count(PostCategory.post_id))
        .filter(PostCategory.category_id == category_id)
        .scalar()
    )


def _to_response(category: Category, post_count: int) -> dict:
    return {
        "id": category.id,
        "name": category.name,
        "created_at": category.created_at,
        "updated_at": category.updated_at,
        "post_count": post_count,
    }


def list_categories(db: Session) -> List[dict]:
    """All categories sorted by name, with the number of linked posts."""
    # Subquery to count posts per category
    post_count_subq = (
        db.query(
            PostCategory.category_id,
            func.count(PostCategory.post_id).label("post_count"),
        )
        .group_by(PostCategory.category_id)
        .subquery()
    )

    rows = (
        db.query(
            Category,
            func.coalesce(post_count_subq.c.post_count, 0).label("post_count"),
        )
        .outerjoin(post_count_subq, Category.id == post_count_subq.c.category_id)
        .order_by(func.lower(Category.name), Category.id)
        .all()
    )

    return [_to_response(category, post_count) for category, post_count in rows]


def get_category(db: Session, category_id: str) -> dict:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise NotFoundError(CATEGORY_NOT_FOUND)

    return _to_response(category, _post_count(db, category_id))


def create_category(db: Session, data: CategoryWrite) -> dict:
    with atomic(db, "create category", failure_message="failed to create category"):
        category = Category(name=data.name)
        db.add(category)
        db.flush()
        db.refresh(category)
        response = _to_response(category, 0)

    logger.info(f"Category created: {category.id} ({category.name!r})")
    return response


def update_category(db: Session, category_id: str, data: CategoryWrite) -> dict:
    """Rename a category."""
    with atomic(
        db,
        f"update category {category_id}",
        not_found_message=CATEGORY_NOT_FOUND,
        failure_message="failed to update category",
    ):
        category = (
            db.query(Category)
            .filter(Category.id == category_id)
            .with_for_update()
            .one()
        )
        category.name = data.name
        db.flush()
        db.refresh(category)
        response = _to_response(category, _post_count(db, category_id))

    logger.info(f"Category updated: {category_id}")
    return response


def delete_category(db: Session, category_id: str) -> str:
    """
    Delete a category and every post link pointing at it.

    Returns:
        Name of the deleted category
    """
    with atomic(
        db,
        f"delete category {category_id}",
        not_found_message=CATEGORY_NOT_FOUND,
        failure_message="failed to delete category",
    ):
        category = (
            db.query(Category)
            .filter(Category.id == category_id)
            .with_for_update()
            .one()
        )
        name = category.name

        unlinked = db.query(PostCategory).filter(
            PostCategory.category_id == category_id
        ).delete(synchronize_session="fetch")
        deleted = db.query(Category).filter(Category.id == category_id).delete(
            synchronize_session="fetch"
        )
        if not deleted:
            raise NotFoundError(CATEGORY_NOT_FOUND)

    logger.info(f"Category deleted: {category_id} ({name!r}), {unlinked} post links removed")
    return name
