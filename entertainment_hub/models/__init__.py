"""
SQLAlchemy Models for Entertainment Hub

Usage:
    from entertainment_hub.models import Admin, Category, Item
    # または
    from entertainment_hub.models import Base
"""

from .base import Base
from .enums import AdminRole, CategoryStatus, ItemStatus
from .admin import Admin
from .category import Category
from .item import Item

__all__ = [
    "Base",
    "AdminRole",
    "CategoryStatus",
    "ItemStatus",
    "Admin",
    "Category",
    "Item",
]
