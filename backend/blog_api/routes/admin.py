"""
Administrative routes.
Create, update and delete for posts and categories.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from blog_api.database import get_db
from blog_api.rate_limiter import limiter, ADMIN_WRITE_LIMIT
from blog_api.schemas import (
    CategoryResponse,
    CategoryWrite,
    MessageResponse,
    PostResponse,
    PostWrite,
)
from blog_api.services import categories as category_service
from blog_api.services import posts as post_service

router = APIRouter(prefix="/admin", tags=["admin"])


# === Posts ===

@router.post("/posts", response_model=PostResponse)
@limiter.limit(ADMIN_WRITE_LIMIT)
def create_post(request: Request, payload: PostWrite, db: Session = Depends(get_db)):
    """
    Create a post linked to payload.categoryIds.

    - 400 if any category does not exist (nothing is saved)
    """
    return post_service.create_post(db, payload)


@router.put("/posts/{post_id}", response_model=PostResponse)
@limiter.limit(ADMIN_WRITE_LIMIT)
def update_post(
    request: Request,
    post_id: str,
    payload: PostWrite,
    db: Session = Depends(get_db),
):
    """
    Update a post and replace its categories with payload.categoryIds.

    - 404 if the post does not exist
    - 400 if any category does not exist (post left unchanged)
    """
    return post_service.update_post(db, post_id, payload)


@router.delete("/posts/{post_id}", response_model=MessageResponse)
@limiter.limit(ADMIN_WRITE_LIMIT)
def delete_post(request: Request, post_id: str, db: Session = Depends(get_db)):
    """Delete a post and its category links."""
    title = post_service.delete_post(db, post_id)
    return {"message": f"{title} deleted"}


# === Categories ===

@router.post("/categories", response_model=CategoryResponse)
@limiter.limit(ADMIN_WRITE_LIMIT)
def create_category(request: Request, payload: CategoryWrite, db: Session = Depends(get_db)):
    """Create a new category."""
    return category_service.create_category(db, payload)


@router.put("/categories/{category_id}", response_model=CategoryResponse)
@limiter.limit(ADMIN_WRITE_LIMIT)
def update_category(
    request: Request,
    category_id: str,
    payload: CategoryWrite,
    db: Session = Depends(get_db),
):
    """Rename a category."""
    return category_service.update_category(db, category_id, payload)


@router.delete("/categories/{category_id}", response_model=MessageResponse)
@limiter.limit(ADMIN_WRITE_LIMIT)
def delete_category(request: Request, category_id: str, db: Session = Depends(get_db)):
    """
    Delete a category.
    Posts stay; only their links to this category are removed.
    """
    name = category_service.delete_category(db, category_id)
    return {"message": f"{name} deleted"}
