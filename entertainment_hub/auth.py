"""
認証ゲート

- パスワードハッシュ（bcrypt）
- JWTトークンの発行・検証（PyJWT）
- 管理者の取得・ロール認可用の FastAPI 依存関数

トークンは Authorization: Bearer ヘッダー、なければ token クッキーから取り出す。
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Cookie, Depends, Header, Request
from sqlalchemy.orm import Session

from entertainment_hub.config import settings
from entertainment_hub.database import get_db
from entertainment_hub.exceptions import ForbiddenError, UnauthorizedError
from entertainment_hub.models.admin import Admin
from entertainment_hub.models.enums import AdminRole

TOKEN_COOKIE_NAME = "token"


# パスワードハッシュ化
def hash_password(password: str) -> str:
    """パスワードをハッシュ化（ソルトはパスワードごとにランダム生成）"""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode(), salt).decode()


def verify_password(password: str, hashed_password: str) -> bool:
    """パスワード検証"""
    return bcrypt.checkpw(password.encode(), hashed_password.encode())


# 存在しないメールアドレスでもハッシュ比較を1回行い、応答時間を揃えるためのダミー
_DUMMY_PASSWORD_HASH = hash_password("dummy-password-for-timing")


def verify_password_or_dummy(password: str, admin: Optional[Admin]) -> bool:
    """管理者が見つからない場合もダミーハッシュと比較してから False を返す"""
    if admin is None:
        verify_password(password, _DUMMY_PASSWORD_HASH)
        return False
    return verify_password(password, admin.password_hash)


# JWTトークン生成
def create_access_token(admin_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """アクセストークン生成（sub = 管理者ID）"""
    if expires_delta is None:
        expires_delta = timedelta(days=settings.JWT_EXPIRE_DAYS)
    now = datetime.now(timezone.utc)
    payload = {"sub": admin_id, "iat": now, "exp": now + expires_delta}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> str:
    """
    トークンを検証して管理者IDを返す

    Raises:
        UnauthorizedError: 期限切れ（"Token expired"）またはそれ以外の不正
    """
    try:
        payload = jwt.decode(
            token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM]
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token expired")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid token.")

    admin_id = payload.get("sub")
    if not admin_id:
        raise UnauthorizedError("Invalid token.")
    return admin_id


def extract_token(authorization: Optional[str], cookie_token: Optional[str]) -> Optional[str]:
    if authorization:
        # Bearer トークンの場合は "Bearer " プレフィックスを削除
        token = authorization[7:] if authorization.startswith("Bearer ") else authorization
        token = token.strip()
        if token:
            return token
    return cookie_token or None


def resolve_admin(db: Session, token: Optional[str]) -> Admin:
    """トークンから有効な管理者を取得"""
    if not token:
        raise UnauthorizedError("Access denied. No token provided.")

    admin_id = decode_access_token(token)

    admin = db.query(Admin).filter(Admin.id == admin_id).first()
    if admin is None:
        raise UnauthorizedError("Invalid token. Admin not found.")
    if not admin.is_active:
        raise UnauthorizedError("Account is inactive. Please contact administrator.")
    return admin


def get_current_admin(
    request: Request,
    authorization: Optional[str] = Header(None),
    token: Optional[str] = Cookie(None),
    db: Session = Depends(get_db),
) -> Admin:
    """トークンから管理者を取得し、request.state.admin に載せる"""
    admin = resolve_admin(db, extract_token(authorization, token))
    request.state.admin = admin
    return admin


def get_optional_admin(
    request: Request,
    authorization: Optional[str] = Header(None),
    token: Optional[str] = Cookie(None),
    db: Session = Depends(get_db),
) -> Optional[Admin]:
    """get_current_admin と同じ手順だが、失敗しても None を返す"""
    try:
        admin = resolve_admin(db, extract_token(authorization, token))
    except UnauthorizedError:
        request.state.admin = None
        return None
    request.state.admin = admin
    return admin


def authorize(*roles: AdminRole):
    """指定ロールのいずれかを持つ管理者のみ許可する依存関数を返す"""

    def dependency(admin: Admin = Depends(get_current_admin)) -> Admin:
        if admin.role not in roles:
            raise ForbiddenError("Access denied. Insufficient permissions.")
        return admin

    return dependency


require_admin = authorize(AdminRole.ADMIN, AdminRole.SUPER_ADMIN)
require_super_admin = authorize(AdminRole.SUPER_ADMIN)
