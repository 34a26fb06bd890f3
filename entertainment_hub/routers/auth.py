"""
Auth API - 管理者のログイン・登録・プロフィール管理
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from entertainment_hub.auth import (
    TOKEN_COOKIE_NAME,
    create_access_token,
    get_current_admin,
    hash_password,
    require_super_admin,
    verify_password,
    verify_password_or_dummy,
)
from entertainment_hub.config import settings
from entertainment_hub.database import get_db
from entertainment_hub.exceptions import UnauthorizedError, ValidationError
from entertainment_hub.models.admin import Admin
from entertainment_hub.rate_limiter import (
    api_limit,
    auth_limit,
    clear_auth_attempts,
    enforce_rate_limits,
)
from entertainment_hub.schemas import (
    AdminData,
    AdminResponse,
    ApiResponse,
    ChangePasswordRequest,
    LoginData,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/auth", tags=["Auth"], dependencies=[Depends(enforce_rate_limits)]
)


def _admin_data(admin: Admin) -> AdminData:
    return AdminData(admin=AdminResponse.model_validate(admin))


@router.post("/login", response_model=ApiResponse[LoginData])
@auth_limit
@api_limit
def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    db: Session = Depends(get_db),
):
    """
    ログイン

    メールアドレスの不一致・パスワードの不一致はどちらも同じメッセージで返す。
    成功時はトークンを返し、同じトークンを httpOnly クッキーにも設定する。
    """
    admin = (
        db.query(Admin)
        .filter(Admin.email == body.email, Admin.is_active.is_(True))
        .first()
    )
    if not verify_password_or_dummy(body.password, admin):
        logger.info("ログイン失敗")
        raise UnauthorizedError("Invalid email or password")

    admin.last_login = datetime.utcnow()
    db.commit()
    db.refresh(admin)

    token = create_access_token(admin.id)
    response.set_cookie(
        key=TOKEN_COOKIE_NAME,
        value=token,
        max_age=settings.JWT_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )

    # 成功したログインは試行回数に数えない
    clear_auth_attempts(request)

    logger.info(f"ログイン成功: admin_id={admin.id}")
    return ApiResponse(
        message="Login successful",
        data=LoginData(admin=AdminResponse.model_validate(admin), token=token),
    )


@router.post(
    "/register",
    response_model=ApiResponse[AdminData],
    status_code=status.HTTP_201_CREATED,
)
@api_limit
def register(
    request: Request,
    body: RegisterRequest,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(require_super_admin),
):
    """管理者登録（super_admin のみ）"""
    existing = (
        db.query(Admin)
        .filter(or_(Admin.email == body.email, Admin.username == body.username))
        .first()
    )
    if existing:
        raise ValidationError("Admin with this email or username already exists")

    admin = Admin(
        username=body.username,
        email=body.email,
        password_hash=hash_password(body.password),
        role=body.role,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)

    logger.info(f"管理者登録: admin_id={admin.id} by={current_admin.id}")
    return ApiResponse(message="Admin registered successfully", data=_admin_data(admin))


@router.post("/logout", response_model=ApiResponse)
@api_limit
def logout(request: Request, response: Response):
    """ログアウト（トークンクッキーを削除）"""
    response.delete_cookie(
        key=TOKEN_COOKIE_NAME,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )
    return ApiResponse(message="Logout successful")


@router.get("/profile", response_model=ApiResponse[AdminData])
@api_limit
def get_profile(request: Request, current_admin: Admin = Depends(get_current_admin)):
    """ログイン中の管理者のプロフィール取得"""
    return ApiResponse(data=_admin_data(current_admin))


@router.put("/profile", response_model=ApiResponse[AdminData])
@api_limit
def update_profile(
    request: Request,
    body: ProfileUpdateRequest,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """ユーザー名・メールアドレスの更新（他の管理者と重複する値は拒否）"""
    conditions = []
    if body.username:
        conditions.append(Admin.username == body.username)
    if body.email:
        conditions.append(Admin.email == body.email)

    if conditions:
        taken = (
            db.query(Admin)
            .filter(Admin.id != current_admin.id, or_(*conditions))
            .first()
        )
        if taken:
            raise ValidationError("Username or email already taken")

    if body.username:
        current_admin.username = body.username
    if body.email:
        current_admin.email = body.email

    db.commit()
    db.refresh(current_admin)

    logger.info(f"プロフィール更新: admin_id={current_admin.id}")
    return ApiResponse(message="Profile updated successfully", data=_admin_data(current_admin))


@router.put("/change-password", response_model=ApiResponse)
@api_limit
def change_password(
    request: Request,
    body: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """パスワード変更（現在のパスワードの確認が必要）"""
    if not verify_password(body.current_password, current_admin.password_hash):
        raise ValidationError("Current password is incorrect")

    current_admin.password_hash = hash_password(body.new_password)
    db.commit()

    logger.info(f"パスワード変更: admin_id={current_admin.id}")
    return ApiResponse(message="Password changed successfully")
