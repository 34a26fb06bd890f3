"""
スラッグ生成サービス

- slugify(): 名前・タイトルから URL 用スラッグを作る純粋関数
- allocate_unique_slug(): 衝突がなくなるまで -1, -2, ... を付け足す

一意性チェックと書き込みは別操作のため、同じスラッグの同時作成は
両方がチェックを通過しうる。その場合は DB の一意制約で後勝ち側が失敗する。
"""

import re
from typing import Optional

from sqlalchemy.orm import Session

from entertainment_hub.exceptions import ValidationError

_INVALID_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_REPEATED_HYPHENS = re.compile(r"-+")


def slugify(value: Optional[str]) -> str:
    """
    文字列を URL 用スラッグに変換

    Examples:
        >>> slugify("  The Last of Us: Part II ")
        'the-last-of-us-part-ii'
        >>> slugify("movies")
        'movies'
    """
    if not value:
        return ""
    slug = value.lower().strip()
    slug = _INVALID_CHARS.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    slug = _REPEATED_HYPHENS.sub("-", slug)
    return slug.strip("-")


def build_base_slug(explicit: Optional[str], source: Optional[str], label: str) -> str:
    """
    明示スラッグ、なければ元文字列からベーススラッグを作る

    Raises:
        ValidationError: どちらからも空でないスラッグが得られない場合
    """
    slug = slugify(explicit) or slugify(source)
    if not slug:
        raise ValidationError(f"{label} is required to generate slug")
    return slug


def slug_exists(db: Session, model, slug: str, exclude_id: Optional[str] = None) -> bool:
    query = db.query(model.id).filter(model.slug == slug)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    return query.first() is not None


def allocate_unique_slug(
    db: Session, model, base: str, exclude_id: Optional[str] = None
) -> str:
    """base, base-1, base-2, ... の順に未使用のスラッグを探す"""
    candidate = base
    counter = 1
    while slug_exists(db, model, candidate, exclude_id):
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate
