"""
画像アップロードサービス - Cloudinary連携

アップロード済み画像は固定フォルダに保存し、
800x600 以内へのリサイズと品質・フォーマットの自動最適化を行う。
"""

import io
import logging
from typing import Dict

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from fastapi import UploadFile

from entertainment_hub.config import settings
from entertainment_hub.exceptions import ExternalServiceError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_FORMATS = ["jpg", "jpeg", "png", "gif", "webp"]
TRANSFORMATION = [
    {"width": 800, "height": 600, "crop": "limit"},
    {"quality": "auto"},
    {"fetch_format": "auto"},
]


def is_configured() -> bool:
    return bool(
        settings.CLOUDINARY_CLOUD_NAME
        and settings.CLOUDINARY_API_KEY
        and settings.CLOUDINARY_API_SECRET
    )


def configure() -> None:
    """環境変数の認証情報で Cloudinary SDK を初期化"""
    cloudinary.config(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET,
        secure=True,
    )


def validate_image(content_type: str, size: int) -> None:
    """
    画像ファイルの検証

    Raises:
        ValidationError: 画像以外のMIMEタイプ、またはサイズ上限超過
    """
    if not content_type or not content_type.startswith("image/"):
        raise ValidationError("Only image files are allowed")
    if size > settings.MAX_UPLOAD_SIZE:
        limit_mb = settings.MAX_UPLOAD_SIZE // (1024 * 1024)
        raise ValidationError(f"Image file is too large. Maximum size is {limit_mb}MB")


async def read_image(image: UploadFile) -> bytes:
    """
    アップロードされた画像を上限サイズ+1バイトまで読み込んで検証

    Raises:
        ValidationError: 画像以外のMIMEタイプ、またはサイズ上限超過
    """
    content = await image.read(settings.MAX_UPLOAD_SIZE + 1)
    validate_image(image.content_type, len(content))
    return content


def upload_image(content: bytes, filename: str) -> Dict[str, str]:
    """
    画像を Cloudinary にアップロード

    Returns:
        {"url": 配信URL, "public_id": Cloudinary の公開ID}

    Raises:
        ExternalServiceError: 未設定、またはアップロード失敗
    """
    if not is_configured():
        raise ExternalServiceError("Image upload is not configured")

    configure()
    try:
        result = cloudinary.uploader.upload(
            io.BytesIO(content),
            folder=settings.CLOUDINARY_FOLDER,
            allowed_formats=ALLOWED_FORMATS,
            transformation=TRANSFORMATION,
            resource_type="image",
        )
    except CloudinaryError as e:
        logger.error(f"Error uploading image to Cloudinary: {filename}: {e}")
        raise ExternalServiceError("Error uploading image")

    logger.info(f"画像アップロード成功: {result.get('public_id')}")
    return {"url": result["secure_url"], "public_id": result["public_id"]}
