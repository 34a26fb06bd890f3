"""
Item Model - アイテムテーブル（映画・シリーズ・ゲーム共通のスーパーセット）
"""
import uuid
from datetime import datetime
from typing import Any, Optional, TYPE_CHECKING
from sqlalchemy import String, Integer, Float, Boolean, DateTime, Text, JSON, Enum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base
from .enums import ItemStatus, enum_values

if TYPE_CHECKING:
    from .admin import Admin
    from .category import Category


class Item(Base):
    """アイテムテーブル"""
    __tablename__ = "items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    slug: Mapped[str] = mapped_column(String(220), unique=True, nullable=False, index=True)
    category_id: Mapped[str] = mapped_column(String(36), ForeignKey("categories.id"), nullable=False, index=True)
    status: Mapped[ItemStatus] = mapped_column(
        Enum(ItemStatus, native_enum=False, values_callable=enum_values, length=20, validate_strings=True),
        default=ItemStatus.DRAFT,
        nullable=False,
        index=True,
    )
    featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    # 基本情報
    title: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    release_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    developer: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    platforms: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    genres: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    key_features: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    story_summary: Mapped[str] = mapped_column(Text, default="", nullable=False)
    highlights: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    author_review: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # メディア
    images: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    thumbnail: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    screenshots: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    soundtrack_links: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    characters: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)

    # 評価
    rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    ratings: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)

    tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    # "metadata" は Declarative の予約語のため属性名を変えている
    extra_metadata: Mapped[dict[str, Any]] = mapped_column("metadata", JSON, default=dict, nullable=False)

    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_by_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("admins.id"), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    category: Mapped["Category"] = relationship("Category", back_populates="items")
    created_by: Mapped[Optional["Admin"]] = relationship("Admin", back_populates="items")
