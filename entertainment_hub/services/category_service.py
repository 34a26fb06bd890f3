"""
カテゴリ（タクソノミ）サービス

一覧・取得・作成・更新・削除・統計。スラッグ生成は slug_service、
アイテム数の再計算は category_counter が担当する。
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import case, func, or_
from sqlalchemy.orm import Session

from entertainment_hub.exceptions import ConflictError, NotFoundError, ValidationError
from entertainment_hub.models.category import Category, DEFAULT_GRADIENT
from entertainment_hub.models.enums import CategoryStatus, ItemStatus
from entertainment_hub.models.item import Item
from entertainment_hub.schemas.category import CategoryCreate, CategoryUpdate
from entertainment_hub.services.slug_service import (
    allocate_unique_slug,
    build_base_slug,
    slug_exists,
    slugify,
)

logger = logging.getLogger(__name__)

# ソート可能なフィールド（クエリ値 -> カラム）
SORT_COLUMNS = {
    "name": Category.name,
    "createdAt": Category.created_at,
    "updatedAt": Category.updated_at,
    "sortOrder": Category.sort_order,
    "itemCount": Category.item_count,
}


def list_categories(
    db: Session,
    page: int = 1,
    limit: int = 10,
    search: Optional[str] = None,
    status: Optional[CategoryStatus] = None,
    sort: str = "createdAt",
    order: str = "desc",
) -> Tuple[List[Category], int]:
    """
    カテゴリ一覧を取得

    Returns:
        (ページ内のカテゴリ, 条件に一致する総件数)
    """
    query = db.query(Category)

    # キーワード検索（名前・説明の部分一致）
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(Category.name.ilike(pattern), Category.description.ilike(pattern))
        )

    if status:
        query = query.filter(Category.status == status)

    total = query.count()

    column = SORT_COLUMNS.get(sort, Category.created_at)
    ordering = column.asc() if order == "asc" else column.desc()
    categories = (
        query.order_by(ordering, Category.id)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return categories, total


def get_category(db: Session, category_id: str) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise NotFoundError("Category not found")
    return category


def create_category(db: Session, data: CategoryCreate) -> Category:
    """スラッグ未指定なら名前から生成し、衝突時は連番を付けて保存する"""
    base_slug = build_base_slug(data.slug, data.name, "Category name")
    slug = allocate_unique_slug(db, Category, base_slug)

    category = Category(
        name=data.name,
        slug=slug,
        description=data.description or "",
        icon=data.icon,
        gradient=data.gradient or DEFAULT_GRADIENT,
        status=data.status or CategoryStatus.ACTIVE,
        sort_order=data.sort_order or 0,
    )
    db.add(category)
    db.commit()
    db.refresh(category)

    logger.info(f"カテゴリ作成: id={category.id} slug={category.slug}")
    return category


def update_category(db: Session, category_id: str, data: CategoryUpdate) -> Category:
    """
    カテゴリを更新

    スラッグが明示されていなければ、名前の変更時に名前から再生成する。
    新しいスラッグが他のカテゴリと重複する場合は ValidationError。
    """
    category = get_category(db, category_id)
    fields = data.model_dump(exclude_unset=True)

    new_slug = slugify(data.slug) if data.slug else None
    if not new_slug and data.name:
        new_slug = slugify(data.name)

    if new_slug and new_slug != category.slug:
        if slug_exists(db, Category, new_slug, exclude_id=category.id):
            raise ValidationError("Category with this slug already exists")
        category.slug = new_slug

    for key in ("name", "description", "icon", "gradient", "status", "sort_order"):
        if key not in fields:
            continue
        value = fields[key]
        if value is None and key in ("name", "status", "sort_order"):
            continue
        if value is None and key == "description":
            value = ""
        setattr(category, key, value)

    db.commit()
    db.refresh(category)

    logger.info(f"カテゴリ更新: id={category.id}")
    return category


def delete_category(db: Session, category_id: str) -> None:
    """参照しているアイテムが1件でもあれば削除しない"""
    category = get_category(db, category_id)

    item_count = (
        db.query(func.count(Item.id)).filter(Item.category_id == category.id).scalar()
    )
    if item_count > 0:
        raise ConflictError(
            f"Cannot delete category. It has {item_count} items. "
            "Please move or delete items first."
        )

    db.delete(category)
    db.commit()
    logger.info(f"カテゴリ削除: id={category_id}")


def category_stats(db: Session) -> List[dict]:
    """カテゴリごとの総数・公開数・下書き数（名前順）"""
    rows = (
        db.query(
            Category.id,
            Category.name,
            Category.slug,
            Category.status,
            func.count(Item.id).label("total_items"),
            func.coalesce(
                func.sum(case((Item.status == ItemStatus.ACTIVE, 1), else_=0)), 0
            ).label("active_items"),
            func.coalesce(
                func.sum(case((Item.status == ItemStatus.DRAFT, 1), else_=0)), 0
            ).label("draft_items"),
        )
        .outerjoin(Item, Item.category_id == Category.id)
        .group_by(Category.id, Category.name, Category.slug, Category.status)
        .order_by(Category.name.asc())
        .all()
    )
    return [
        {
            "id": row.id,
            "name": row.name,
            "slug": row.slug,
            "status": row.status,
            "total_items": int(row.total_items),
            "active_items": int(row.active_items),
            "draft_items": int(row.draft_items),
        }
        for row in rows
    ]
