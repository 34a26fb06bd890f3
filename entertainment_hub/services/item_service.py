"""
アイテム（カタログ）サービス

作成・更新・削除のたびに、影響を受けたカテゴリのアイテム数を
category_counter で再計算する。
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import case, func, or_
from sqlalchemy.orm import Session, joinedload

from entertainment_hub.exceptions import NotFoundError, ValidationError
from entertainment_hub.models.admin import Admin
from entertainment_hub.models.category import Category
from entertainment_hub.models.enums import ItemStatus
from entertainment_hub.models.item import Item
from entertainment_hub.schemas.item import ItemCreate, ItemUpdate
from entertainment_hub.services import category_counter
from entertainment_hub.services.slug_service import (
    allocate_unique_slug,
    build_base_slug,
    slug_exists,
    slugify,
)

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "title": Item.title,
    "createdAt": Item.created_at,
    "updatedAt": Item.updated_at,
    "sortOrder": Item.sort_order,
    "rating": Item.rating,
    "viewCount": Item.view_count,
}

# None を受け取ったときに空値へ置き換えるフィールド
LIST_FIELDS = {
    "platforms",
    "genres",
    "key_features",
    "highlights",
    "images",
    "screenshots",
    "soundtrack_links",
    "characters",
    "tags",
}
EMPTY_VALUES = {"extra_metadata": dict, "story_summary": str}
# None では上書きしないフィールド
NON_NULLABLE_FIELDS = {"featured", "status", "sort_order"}

# 直接代入するフィールド（slug / category / ratings は個別処理）
ASSIGNABLE_FIELDS = (
    LIST_FIELDS
    | set(EMPTY_VALUES)
    | NON_NULLABLE_FIELDS
    | {
        "title",
        "description",
        "release_date",
        "developer",
        "author_review",
        "thumbnail",
        "rating",
    }
)


def _base_query(db: Session):
    return db.query(Item).options(
        joinedload(Item.category),
        joinedload(Item.created_by),
    )


def _clean_ratings(ratings: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """null や空オブジェクトは評価ブロックの削除として扱う"""
    if not ratings:
        return None
    cleaned = {key: value for key, value in ratings.items() if value is not None}
    return cleaned or None


def _apply_fields(item: Item, fields: Dict[str, Any]) -> None:
    for key, value in fields.items():
        if key not in ASSIGNABLE_FIELDS:
            continue
        if value is None:
            if key in NON_NULLABLE_FIELDS:
                continue
            if key in LIST_FIELDS:
                value = []
            elif key in EMPTY_VALUES:
                value = EMPTY_VALUES[key]()
        setattr(item, key, value)
    if "ratings" in fields:
        item.ratings = _clean_ratings(fields["ratings"])


def _ensure_category(db: Session, category_id: str) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise ValidationError("Category not found")
    return category


def list_items(
    db: Session,
    page: int = 1,
    limit: int = 10,
    search: Optional[str] = None,
    category_id: Optional[str] = None,
    status: Optional[ItemStatus] = None,
    featured: Optional[bool] = None,
    sort: str = "createdAt",
    order: str = "desc",
) -> Tuple[List[Item], int]:
    """
    アイテム一覧を取得

    Returns:
        (ページ内のアイテム, 条件に一致する総件数)
    """
    query = db.query(Item)

    # キーワード検索（タイトル・説明の部分一致）
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(Item.title.ilike(pattern), Item.description.ilike(pattern))
        )

    if category_id:
        query = query.filter(Item.category_id == category_id)

    if status:
        query = query.filter(Item.status == status)

    if featured is not None:
        query = query.filter(Item.featured == featured)

    total = query.count()

    column = SORT_COLUMNS.get(sort, Item.created_at)
    ordering = column.asc() if order == "asc" else column.desc()
    items = (
        query.options(joinedload(Item.category), joinedload(Item.created_by))
        .order_by(ordering, Item.id)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return items, total


def get_item(db: Session, item_id: str) -> Item:
    item = _base_query(db).filter(Item.id == item_id).first()
    if not item:
        raise NotFoundError("Item not found")
    return item


def record_view(db: Session, item: Item) -> Item:
    """公開側からの閲覧を1回カウントする"""
    db.query(Item).filter(Item.id == item.id).update(
        {Item.view_count: Item.view_count + 1}, synchronize_session=False
    )
    db.commit()
    return get_item(db, item.id)


def create_item(db: Session, data: ItemCreate, admin: Optional[Admin] = None) -> Item:
    """
    アイテムを作成

    カテゴリの存在を確認し、タイトル（またはスラッグ）から一意なスラッグを割り当てる。
    """
    category = _ensure_category(db, data.category)

    base_slug = build_base_slug(data.slug, data.title, "Title")
    slug = allocate_unique_slug(db, Item, base_slug)

    item = Item(
        slug=slug,
        category_id=category.id,
        status=ItemStatus.DRAFT,
        featured=False,
        sort_order=0,
        created_by_id=admin.id if admin else None,
    )
    _apply_fields(item, data.model_dump(exclude_unset=True))
    db.add(item)
    db.commit()

    category_counter.recount_category_items(db, category.id)

    logger.info(f"アイテム作成: id={item.id} slug={item.slug} category={category.id}")
    return get_item(db, item.id)


def update_item(db: Session, item_id: str, data: ItemUpdate) -> Item:
    """
    アイテムを更新

    カテゴリが変わった場合は旧・新両方のカテゴリ、
    それ以外は現在のカテゴリのアイテム数を再計算する。
    """
    item = get_item(db, item_id)
    old_category_id = item.category_id
    fields = data.model_dump(exclude_unset=True)

    new_category_id = data.category or old_category_id
    if new_category_id != old_category_id:
        _ensure_category(db, new_category_id)

    new_slug = slugify(data.slug) if data.slug else None
    if not new_slug and data.title:
        new_slug = slugify(data.title)

    if new_slug and new_slug != item.slug:
        if slug_exists(db, Item, new_slug, exclude_id=item.id):
            raise ValidationError("Item with this slug already exists")
        item.slug = new_slug

    item.category_id = new_category_id
    _apply_fields(item, fields)
    db.commit()

    category_counter.recount_categories(db, [old_category_id, new_category_id])

    logger.info(f"アイテム更新: id={item.id}")
    return get_item(db, item.id)


def update_item_status(db: Session, item_id: str, status: ItemStatus) -> Item:
    item = get_item(db, item_id)
    item.status = status
    db.commit()

    category_counter.recount_category_items(db, item.category_id)
    return get_item(db, item_id)


def delete_item(db: Session, item_id: str) -> None:
    item = get_item(db, item_id)
    category_id = item.category_id

    db.delete(item)
    db.commit()

    category_counter.recount_category_items(db, category_id)
    logger.info(f"アイテム削除: id={item_id}")


def bulk_delete_items(db: Session, ids: List[str]) -> int:
    """
    複数アイテムを一括削除

    Returns:
        削除件数
    """
    items = db.query(Item.id, Item.category_id).filter(Item.id.in_(ids)).all()
    category_ids = [row.category_id for row in items]

    deleted = (
        db.query(Item)
        .filter(Item.id.in_([row.id for row in items]))
        .delete(synchronize_session=False)
    )
    db.commit()

    category_counter.recount_categories(db, category_ids)

    logger.info(f"アイテム一括削除: {deleted}件")
    return deleted


def item_stats(db: Session) -> Dict[str, Any]:
    """ステータス別の集計とカテゴリ別の件数"""
    overview = db.query(
        func.count(Item.id).label("total"),
        func.sum(case((Item.status == ItemStatus.ACTIVE, 1), else_=0)).label("active"),
        func.sum(case((Item.status == ItemStatus.INACTIVE, 1), else_=0)).label("inactive"),
        func.sum(case((Item.status == ItemStatus.DRAFT, 1), else_=0)).label("draft"),
        func.sum(case((Item.featured, 1), else_=0)).label("featured"),
        func.avg(Item.rating).label("average_rating"),
        func.sum(Item.view_count).label("total_views"),
    ).one()

    by_category = (
        db.query(
            Category.id,
            Category.name,
            Category.slug,
            func.count(Item.id).label("count"),
        )
        .join(Item, Item.category_id == Category.id)
        .group_by(Category.id, Category.name, Category.slug)
        .order_by(func.count(Item.id).desc(), Category.name.asc())
        .all()
    )

    return {
        "overview": {
            "total": overview.total or 0,
            "active": overview.active or 0,
            "inactive": overview.inactive or 0,
            "draft": overview.draft or 0,
            "featured": overview.featured or 0,
            "average_rating": round(float(overview.average_rating or 0), 2),
            "total_views": overview.total_views or 0,
        },
        "by_category": [
            {"id": row.id, "name": row.name, "slug": row.slug, "count": row.count}
            for row in by_category
        ],
    }
