"""
Pydantic Schemas for Entertainment Hub
Based on entertainment_hub/models
"""

from .base import BaseSchema, ApiResponse, Pagination, BlankAsNone
from .admin import (
    LoginRequest,
    RegisterRequest,
    ProfileUpdateRequest,
    ChangePasswordRequest,
    AdminResponse,
    AdminData,
    LoginData,
)
from .category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoryRef,
    CategoryStat,
    CategoryData,
    CategoryListData,
    CategoryStatsData,
)
from .item import (
    ItemCreate,
    ItemUpdate,
    ItemStatusUpdate,
    BulkDeleteRequest,
    ItemResponse,
    ItemOverview,
    CategoryBreakdown,
    ItemData,
    ItemListData,
    ItemStatsData,
    UploadData,
    UploadResponse,
)

__all__ = [
    "BaseSchema",
    "ApiResponse",
    "Pagination",
    "BlankAsNone",
    "LoginRequest",
    "RegisterRequest",
    "ProfileUpdateRequest",
    "ChangePasswordRequest",
    "AdminResponse",
    "AdminData",
    "LoginData",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "CategoryRef",
    "CategoryStat",
    "CategoryData",
    "CategoryListData",
    "CategoryStatsData",
    "ItemCreate",
    "ItemUpdate",
    "ItemStatusUpdate",
    "BulkDeleteRequest",
    "ItemResponse",
    "ItemOverview",
    "CategoryBreakdown",
    "ItemData",
    "ItemListData",
    "ItemStatsData",
    "UploadData",
    "UploadResponse",
]
