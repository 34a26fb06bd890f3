"""
Categories API - カテゴリの一覧・取得・作成・更新・削除・統計
"""

from typing import Annotated, Literal, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from entertainment_hub.auth import get_optional_admin, require_admin
from entertainment_hub.database import get_db
from entertainment_hub.models.admin import Admin
from entertainment_hub.models.enums import CategoryStatus
from entertainment_hub.rate_limiter import api_limit, create_limit, enforce_rate_limits
from entertainment_hub.schemas import (
    ApiResponse,
    BlankAsNone,
    CategoryCreate,
    CategoryData,
    CategoryListData,
    CategoryResponse,
    CategoryStat,
    CategoryStatsData,
    CategoryUpdate,
    Pagination,
)
from entertainment_hub.services import category_service

router = APIRouter(
    prefix="/api/categories",
    tags=["Categories"],
    dependencies=[Depends(enforce_rate_limits)],
)

CategorySort = Literal["name", "createdAt", "updatedAt", "sortOrder", "itemCount"]


def _category_data(category) -> CategoryData:
    return CategoryData(category=CategoryResponse.model_validate(category))


@router.get("", response_model=ApiResponse[CategoryListData])
@api_limit
def list_categories(
    request: Request,
    page: int = Query(1, ge=1, description="ページ番号"),
    limit: int = Query(10, ge=1, le=100, description="1ページあたりの取得件数"),
    search: Annotated[
        Optional[str], BlankAsNone, Query(max_length=100, description="名前・説明の部分一致")
    ] = None,
    category_status: Annotated[
        Optional[CategoryStatus], BlankAsNone, Query(alias="status")
    ] = None,
    sort: CategorySort = Query("createdAt"),
    order: Literal["asc", "desc"] = Query("desc"),
    db: Session = Depends(get_db),
    admin: Optional[Admin] = Depends(get_optional_admin),
):
    """カテゴリ一覧（ページネーション付き）"""
    categories, total = category_service.list_categories(
        db,
        page=page,
        limit=limit,
        search=search,
        status=category_status,
        sort=sort,
        order=order,
    )
    return ApiResponse(
        data=CategoryListData(
            categories=[CategoryResponse.model_validate(c) for c in categories],
            pagination=Pagination.build(page, limit, total),
        )
    )


# /{category_id} より先に登録する
@router.get("/stats", response_model=ApiResponse[CategoryStatsData])
@api_limit
def get_category_stats(
    request: Request,
    db: Session = Depends(get_db),
    admin: Optional[Admin] = Depends(get_optional_admin),
):
    """カテゴリごとのアイテム数（総数・公開・下書き）"""
    stats = category_service.category_stats(db)
    return ApiResponse(
        data=CategoryStatsData(stats=[CategoryStat(**row) for row in stats])
    )


@router.get("/{category_id}", response_model=ApiResponse[CategoryData])
@api_limit
def get_category(
    request: Request,
    category_id: str,
    db: Session = Depends(get_db),
    admin: Optional[Admin] = Depends(get_optional_admin),
):
    category = category_service.get_category(db, category_id)
    return ApiResponse(data=_category_data(category))


@router.post(
    "",
    response_model=ApiResponse[CategoryData],
    status_code=status.HTTP_201_CREATED,
)
@create_limit
@api_limit
def create_category(
    request: Request,
    body: CategoryCreate,
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin),
):
    """カテゴリ作成（スラッグ未指定なら名前から生成）"""
    category = category_service.create_category(db, body)
    return ApiResponse(message="Category created successfully", data=_category_data(category))


@router.put("/{category_id}", response_model=ApiResponse[CategoryData])
@api_limit
def update_category(
    request: Request,
    category_id: str,
    body: CategoryUpdate,
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin),
):
    category = category_service.update_category(db, category_id, body)
    return ApiResponse(message="Category updated successfully", data=_category_data(category))


@router.delete("/{category_id}", response_model=ApiResponse)
@api_limit
def delete_category(
    request: Request,
    category_id: str,
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin),
):
    """カテゴリ削除（アイテムが残っている場合は 409）"""
    category_service.delete_category(db, category_id)
    return ApiResponse(message="Category deleted successfully")
