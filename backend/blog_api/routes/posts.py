"""
Public post routes.
List and detail projections.
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from blog_api.database import get_db
from blog_api.schemas import PostListItem, PostDetail
from blog_api.services import posts as post_service

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=List[PostListItem])
def list_posts(db: Session = Depends(get_db)):
    """
    List every post with its categories.
    Sorted by creation date, newest first.
    """
    return post_service.list_posts(db)


@router.get("/{post_id}", response_model=PostDetail)
def get_post(post_id: str, db: Session = Depends(get_db)):
    """Fetch one post with full content and categories."""
    return post_service.get_post(db, post_id)
