"""Admin / auth schemas"""
import re
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from entertainment_hub.models.enums import AdminRole
from .base import BaseSchema

USERNAME_PATTERN = r"^[a-zA-Z0-9_]+$"
PASSWORD_STRENGTH = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def check_password_strength(value: str) -> str:
    if len(value) < 6:
        raise ValueError("Password must be at least 6 characters long")
    if not PASSWORD_STRENGTH.match(value):
        raise ValueError(
            "Password must contain at least one lowercase letter, one uppercase letter, and one number"
        )
    return value


class LoginRequest(BaseSchema):
    """Login request"""
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class RegisterRequest(BaseSchema):
    """Admin registration request (super_admin only)"""
    username: str = Field(..., min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str
    role: AdminRole = AdminRole.ADMIN

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return check_password_strength(v)


class ProfileUpdateRequest(BaseSchema):
    """Profile update request"""
    username: Optional[str] = Field(None, min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    email: Optional[EmailStr] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v


class ChangePasswordRequest(BaseSchema):
    """Password change request"""
    current_password: str = Field(..., min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return check_password_strength(v)


class AdminResponse(BaseSchema):
    """Admin summary (never includes the password hash)"""
    id: str
    username: str
    email: str
    role: AdminRole
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None


class AdminData(BaseSchema):
    admin: AdminResponse


class LoginData(BaseSchema):
    admin: AdminResponse
    token: str
