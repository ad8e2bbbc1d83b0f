"""
Public category routes.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from blog_api.database import get_db
from blog_api.schemas import CategoryResponse
from blog_api.services import categories as category_service

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=List[CategoryResponse])
def list_categories(db: Session = Depends(get_db)):
    """List all categories sorted by name."""
    return category_service.list_categories(db)


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(category_id: str, db: Session = Depends(get_db)):
    """Fetch a category by ID."""
    return category_service.get_category(db, category_id)
