"""
ドメインサービス
"""

from .slug_service import slugify, allocate_unique_slug
from .category_counter import recount_category_items, recount_categories

__all__ = [
    "slugify",
    "allocate_unique_slug",
    "recount_category_items",
    "recount_categories",
]
