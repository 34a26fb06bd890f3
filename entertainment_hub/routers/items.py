"""
Items API - アイテム（映画・シリーズ・アニメ・ゲーム）の管理と画像アップロード
"""

from typing import Annotated, Literal, Optional

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from entertainment_hub.auth import get_optional_admin, require_admin
from entertainment_hub.database import get_db
from entertainment_hub.exceptions import ValidationError
from entertainment_hub.models.admin import Admin
from entertainment_hub.models.enums import ItemStatus
from entertainment_hub.rate_limiter import (
    api_limit,
    create_limit,
    enforce_rate_limits,
    upload_limit,
)
from entertainment_hub.schemas import (
    ApiResponse,
    BlankAsNone,
    BulkDeleteRequest,
    ItemCreate,
    ItemData,
    ItemListData,
    ItemResponse,
    ItemStatsData,
    ItemStatusUpdate,
    ItemUpdate,
    Pagination,
    UploadData,
    UploadResponse,
)
from entertainment_hub.services import image_upload, item_service

router = APIRouter(
    prefix="/api/items",
    tags=["Items"],
    dependencies=[Depends(enforce_rate_limits)],
)

ItemSort = Literal["title", "createdAt", "updatedAt", "sortOrder", "rating", "viewCount"]


def _item_data(item) -> ItemData:
    return ItemData(item=ItemResponse.model_validate(item))


# ============================================
# 一覧・統計・取得
# ============================================
@router.get("", response_model=ApiResponse[ItemListData])
@api_limit
def list_items(
    request: Request,
    page: int = Query(1, ge=1, description="ページ番号"),
    limit: int = Query(10, ge=1, le=100, description="1ページあたりの取得件数"),
    search: Annotated[
        Optional[str], BlankAsNone, Query(max_length=100, description="タイトル・説明の部分一致")
    ] = None,
    category: Annotated[Optional[str], BlankAsNone, Query(description="カテゴリID")] = None,
    item_status: Annotated[Optional[ItemStatus], BlankAsNone, Query(alias="status")] = None,
    featured: Annotated[Optional[bool], BlankAsNone, Query()] = None,
    sort: ItemSort = Query("createdAt"),
    order: Literal["asc", "desc"] = Query("desc"),
    db: Session = Depends(get_db),
    admin: Optional[Admin] = Depends(get_optional_admin),
):
    """アイテム一覧（カテゴリ・ステータス・おすすめで絞り込み可能）"""
    items, total = item_service.list_items(
        db,
        page=page,
        limit=limit,
        search=search,
        category_id=category,
        status=item_status,
        featured=featured,
        sort=sort,
        order=order,
    )
    return ApiResponse(
        data=ItemListData(
            items=[ItemResponse.model_validate(item) for item in items],
            pagination=Pagination.build(page, limit, total),
        )
    )


@router.get("/stats", response_model=ApiResponse[ItemStatsData])
@api_limit
def get_item_stats(
    request: Request,
    db: Session = Depends(get_db),
    admin: Optional[Admin] = Depends(get_optional_admin),
):
    """ステータス別の集計とカテゴリ別の件数"""
    stats = item_service.item_stats(db)
    return ApiResponse(data=ItemStatsData(**stats))


@router.get("/{item_id}", response_model=ApiResponse[ItemData])
@api_limit
def get_item(
    request: Request,
    item_id: str,
    db: Session = Depends(get_db),
    admin: Optional[Admin] = Depends(get_optional_admin),
):
    """アイテム取得（未ログインの閲覧は viewCount を加算）"""
    item = item_service.get_item(db, item_id)
    if admin is None:
        item = item_service.record_view(db, item)
    return ApiResponse(data=_item_data(item))


# ============================================
# 作成・更新・削除
# ============================================
@router.post(
    "",
    response_model=ApiResponse[ItemData],
    status_code=status.HTTP_201_CREATED,
)
@create_limit
@api_limit
def create_item(
    request: Request,
    body: ItemCreate,
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin),
):
    """アイテム作成（category のみ必須）"""
    item = item_service.create_item(db, body, admin)
    return ApiResponse(message="Item created successfully", data=_item_data(item))


@router.put("/{item_id}", response_model=ApiResponse[ItemData])
@api_limit
def update_item(
    request: Request,
    item_id: str,
    body: ItemUpdate,
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin),
):
    item = item_service.update_item(db, item_id, body)
    return ApiResponse(message="Item updated successfully", data=_item_data(item))


@router.patch("/{item_id}/status", response_model=ApiResponse[ItemData])
@api_limit
def update_item_status(
    request: Request,
    item_id: str,
    body: ItemStatusUpdate,
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin),
):
    item = item_service.update_item_status(db, item_id, body.status)
    return ApiResponse(message="Item status updated successfully", data=_item_data(item))


@router.delete("", response_model=ApiResponse)
@api_limit
def bulk_delete_items(
    request: Request,
    body: BulkDeleteRequest,
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin),
):
    """複数アイテムの一括削除（body: {"ids": [...]})"""
    deleted = item_service.bulk_delete_items(db, body.ids)
    return ApiResponse(message=f"{deleted} items deleted successfully")


@router.delete("/{item_id}", response_model=ApiResponse)
@api_limit
def delete_item(
    request: Request,
    item_id: str,
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin),
):
    item_service.delete_item(db, item_id)
    return ApiResponse(message="Item deleted successfully")


# ============================================
# 画像アップロード
# ============================================
async def _handle_upload(image: Optional[UploadFile]) -> UploadResponse:
    if image is None:
        raise ValidationError("No image file provided")

    content = await image_upload.read_image(image)

    result = await run_in_threadpool(
        image_upload.upload_image, content, image.filename or "upload"
    )
    return UploadResponse(
        message="Image uploaded successfully",
        url=result["url"],
        data=UploadData(image_url=result["url"], public_id=result["public_id"]),
    )


@router.post("/upload", response_model=UploadResponse)
@upload_limit
@api_limit
async def upload_item_image(
    request: Request,
    image: Optional[UploadFile] = File(None),
    admin: Admin = Depends(require_admin),
):
    """画像を Cloudinary にアップロード（multipart フィールド名: image）"""
    return await _handle_upload(image)


@router.post("/upload-image", response_model=UploadResponse)
@upload_limit
@api_limit
async def upload_item_image_alias(
    request: Request,
    image: Optional[UploadFile] = File(None),
    admin: Admin = Depends(require_admin),
):
    """/upload と同じ処理（旧クライアント向けのパス）"""
    return await _handle_upload(image)
