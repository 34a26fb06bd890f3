"""Item schemas

One superset schema covers both catalog shapes (movies/series with images,
tags and metadata; games with a ratings block and a character list). Every
descriptive field is optional; only ``category`` is required on create.
"""
from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional

from pydantic import AliasChoices, Field, StringConstraints, field_validator

from entertainment_hub.models.enums import ItemStatus
from .base import BaseSchema, Pagination, SLUG_PATTERN
from .category import CategoryRef

Tag = Annotated[
    str, StringConstraints(strip_whitespace=True, to_lower=True, min_length=1, max_length=30)
]


class Ratings(BaseSchema):
    """Per-aspect ratings, each 1-5"""
    story: Optional[float] = Field(None, ge=1, le=5)
    graphics: Optional[float] = Field(None, ge=1, le=5)
    gameplay: Optional[float] = Field(None, ge=1, le=5)
    replayability: Optional[float] = Field(None, ge=1, le=5)


class Character(BaseSchema):
    name: Optional[str] = Field(None, max_length=100)
    image: Optional[str] = None
    description: Optional[str] = Field(None, max_length=300)


class ItemFields(BaseSchema):
    """Fields accepted on create and update"""
    title: Optional[str] = Field(None, max_length=200)
    slug: Optional[str] = Field(None, min_length=1, max_length=200, pattern=SLUG_PATTERN)
    description: Optional[str] = Field(None, max_length=2000)
    release_date: Optional[datetime] = None
    developer: Optional[str] = Field(None, max_length=100)
    platforms: Optional[List[str]] = None
    genres: Optional[List[str]] = None
    key_features: Optional[List[str]] = None
    story_summary: Optional[str] = None
    highlights: Optional[List[str]] = None
    author_review: Optional[str] = None
    images: Optional[List[str]] = None
    thumbnail: Optional[str] = Field(None, max_length=1000)
    screenshots: Optional[List[str]] = None
    soundtrack_links: Optional[List[str]] = None
    characters: Optional[List[Character]] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    ratings: Optional[Ratings] = None
    tags: Optional[List[Tag]] = None
    extra_metadata: Optional[Dict[str, Any]] = Field(
        None, validation_alias=AliasChoices("metadata", "extra_metadata")
    )
    featured: Optional[bool] = None
    sort_order: Optional[int] = Field(None, ge=0)
    status: Optional[ItemStatus] = None

    @field_validator("slug", mode="before")
    @classmethod
    def blank_slug_is_absent(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("soundtrack_links")
    @classmethod
    def http_links_only(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v and not all(link.startswith(("http://", "https://")) for link in v):
            raise ValueError("All soundtrack links must be valid URLs.")
        return v


class ItemCreate(ItemFields):
    """Schema for creating an item"""
    category: str = Field(..., min_length=1, max_length=36)


class ItemUpdate(ItemFields):
    """Schema for updating an item"""
    category: Optional[str] = Field(None, min_length=1, max_length=36)


class ItemStatusUpdate(BaseSchema):
    status: ItemStatus


class BulkDeleteRequest(BaseSchema):
    ids: List[str] = Field(..., min_length=1)


class AdminRef(BaseSchema):
    id: str
    username: str


class ItemResponse(BaseSchema):
    """Schema for item response"""
    id: str
    slug: str
    title: Optional[str] = None
    description: Optional[str] = None
    release_date: Optional[datetime] = None
    developer: Optional[str] = None
    platforms: List[str] = []
    genres: List[str] = []
    key_features: List[str] = []
    story_summary: str = ""
    highlights: List[str] = []
    author_review: Optional[str] = None
    images: List[str] = []
    thumbnail: Optional[str] = None
    screenshots: List[str] = []
    soundtrack_links: List[str] = []
    characters: List[Dict[str, Any]] = []
    rating: Optional[float] = None
    ratings: Optional[Dict[str, Any]] = None
    tags: List[str] = []
    extra_metadata: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("extra_metadata", "metadata"),
        serialization_alias="metadata",
    )
    featured: bool
    status: ItemStatus
    view_count: int
    sort_order: int
    category: Optional[CategoryRef] = None
    created_by: Optional[AdminRef] = None
    created_at: datetime
    updated_at: datetime


class ItemOverview(BaseSchema):
    total: int = 0
    active: int = 0
    inactive: int = 0
    draft: int = 0
    featured: int = 0
    average_rating: float = 0
    total_views: int = 0


class CategoryBreakdown(BaseSchema):
    id: str
    name: str
    slug: str
    count: int


class ItemData(BaseSchema):
    item: ItemResponse


class ItemListData(BaseSchema):
    items: List[ItemResponse]
    pagination: Pagination


class ItemStatsData(BaseSchema):
    overview: ItemOverview
    by_category: List[CategoryBreakdown]


class UploadData(BaseSchema):
    image_url: str
    public_id: str


class UploadResponse(BaseSchema):
    """Upload response; ``url`` is duplicated at top level for older clients"""
    success: bool = True
    message: str
    url: str
    data: UploadData
