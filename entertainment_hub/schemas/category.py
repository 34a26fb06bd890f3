"""Category schemas"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from entertainment_hub.models.enums import CategoryStatus
from .base import BaseSchema, Pagination, SLUG_PATTERN


class CategoryFields(BaseSchema):
    """Fields accepted on create and update"""
    slug: Optional[str] = Field(None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    description: Optional[str] = Field(None, max_length=500)
    icon: Optional[str] = Field(None, max_length=50)
    gradient: Optional[str] = Field(None, max_length=100)
    status: Optional[CategoryStatus] = None
    sort_order: Optional[int] = Field(None, ge=0)

    @field_validator("slug", mode="before")
    @classmethod
    def blank_slug_is_absent(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class CategoryCreate(CategoryFields):
    """Schema for creating a category"""
    name: str = Field(..., min_length=1, max_length=100)


class CategoryUpdate(CategoryFields):
    """Schema for updating a category"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)


class CategoryResponse(BaseSchema):
    """Schema for category response"""
    id: str
    name: str
    slug: str
    description: str
    icon: Optional[str] = None
    gradient: Optional[str] = None
    status: CategoryStatus
    sort_order: int
    item_count: int
    created_at: datetime
    updated_at: datetime


class CategoryRef(BaseSchema):
    """Category as embedded in an item"""
    id: str
    name: str
    slug: str


class CategoryStat(BaseSchema):
    id: str
    name: str
    slug: str
    status: CategoryStatus
    total_items: int
    active_items: int
    draft_items: int


class CategoryData(BaseSchema):
    category: CategoryResponse


class CategoryListData(BaseSchema):
    categories: List[CategoryResponse]
    pagination: Pagination


class CategoryStatsData(BaseSchema):
    stats: List[CategoryStat]
