"""
カテゴリのアイテム数（非正規化カウンタ）の再計算

アイテムの作成・更新・削除の後に呼び出す。カウンタはベストエフォートで、
失敗してもログに残すだけで呼び出し元のリクエストは失敗させない。
"""

import logging
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from entertainment_hub.models.category import Category
from entertainment_hub.models.enums import ItemStatus
from entertainment_hub.models.item import Item

logger = logging.getLogger(__name__)


def recount_category_items(db: Session, category_id: Optional[str]) -> Optional[int]:
    """
    status=active のアイテム数を数えて Category.item_count に書き込む

    Returns:
        書き込んだ件数。失敗時は None
    """
    if not category_id:
        return None
    try:
        count = (
            db.query(func.count(Item.id))
            .filter(Item.category_id == category_id, Item.status == ItemStatus.ACTIVE)
            .scalar()
        )
        db.query(Category).filter(Category.id == category_id).update(
            {Category.item_count: count}, synchronize_session=False
        )
        db.commit()
        return count
    except Exception as e:
        db.rollback()
        logger.error(f"Update category item count error: category_id={category_id}: {e}")
        return None


def recount_categories(db: Session, category_ids: Iterable[Optional[str]]) -> None:
    """重複を除いたカテゴリごとに一度だけ再計算する"""
    for category_id in dict.fromkeys(cid for cid in category_ids if cid):
        recount_category_items(db, category_id)
