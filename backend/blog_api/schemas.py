"""
Pydantic schemas for request/response validation.
Field names are camelCase on the wire (coverImageURL, categoryIds, ...).
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Optional, List


def _not_blank(value: str, field: str) -> str:
    # Rejects whitespace-only values; the stored text is kept as sent
    if not value.strip():
        raise ValueError(f"{field} must not be empty")
    return value


# === Categories ===

class CategoryWrite(BaseModel):
    """Request to create or rename a category"""
    name: str

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return _not_blank(value, "name")


class CategoryRef(BaseModel):
    """Category as embedded in post projections (no timestamps)"""
    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class CategoryLink(BaseModel):
    """One entry of a post's categories: {category: {id, name}}"""
    category: CategoryRef

    model_config = ConfigDict(from_attributes=True)


class CategoryResponse(BaseModel):
    """Category response"""
    id: str
    name: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    post_count: Optional[int] = Field(default=0, alias="postCount")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


# === Posts ===

class PostWrite(BaseModel):
    """Request to create or update a post"""
    title: str
    content: str = ""
    cover_image_url: str = Field(default="", alias="coverImageURL")
    category_ids: List[str] = Field(default_factory=list, alias="categoryIds")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        return _not_blank(value, "title")


class PostResponse(BaseModel):
    """Post scalar fields, returned by create/update"""
    id: str
    title: str
    content: str
    cover_image_url: str = Field(alias="coverImageURL")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class PostListItem(BaseModel):
    """List projection of a post"""
    id: str
    title: str
    content: str
    created_at: datetime = Field(alias="createdAt")
    categories: List[CategoryLink]

    model_config = ConfigDict(populate_by_name=True)


class PostDetail(BaseModel):
    """Detail projection of a post, raw content plus the sanitized rendering"""
    id: str
    title: str
    content: str
    safe_content: Optional[str] = Field(default=None, alias="safeContent")
    cover_image_url: str = Field(alias="coverImageURL")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    categories: List[CategoryLink]

    model_config = ConfigDict(populate_by_name=True)


class MessageResponse(BaseModel):
    """Confirmation returned by delete endpoints"""
    message: str
