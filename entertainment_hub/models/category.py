"""
Category Model - カテゴリーテーブル
"""
import uuid
from datetime import datetime
from typing import Optional, TYPE_CHECKING
from sqlalchemy import String, Integer, DateTime, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base
from .enums import CategoryStatus, enum_values

if TYPE_CHECKING:
    from .item import Item

DEFAULT_GRADIENT = "from-blue-500 to-purple-600"


class Category(Base):
    """カテゴリーテーブル"""
    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    description: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    icon: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    gradient: Mapped[Optional[str]] = mapped_column(String(100), default=DEFAULT_GRADIENT, nullable=True)
    status: Mapped[CategoryStatus] = mapped_column(
        Enum(CategoryStatus, native_enum=False, values_callable=enum_values, length=20, validate_strings=True),
        default=CategoryStatus.ACTIVE,
        nullable=False,
        index=True,
    )
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False, index=True)
    # 非正規化カウンタ（status=active のアイテム数）
    item_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    items: Mapped[list["Item"]] = relationship(
        "Item",
        back_populates="category"
    )
