"""User schemas"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import BaseSchema


class UserPublic(BaseSchema):
    """他ユーザーに見せる最小限の情報"""
    id: str
    username: str
    name: Optional[str] = None


class UserResponse(UserPublic):
    """ログインユーザー本人の情報"""
    email: str
    country: Optional[str] = None
    bio: Optional[str] = None
    role: str
    is_pro: bool = False
    email_verified: bool = False
    created_at: Optional[datetime] = None


class ProfileUpdateRequest(BaseSchema):
    """プロフィール更新リクエスト"""
    name: Optional[str] = Field(None, max_length=100, description="表示名")
    country: Optional[str] = Field(None, max_length=100, description="国")
    bio: Optional[str] = Field(None, max_length=2000, description="自己紹介")


class PasswordChangeRequest(BaseSchema):
    """パスワード変更リクエスト"""
    current_password: str = Field(..., min_length=1, description="現在のパスワード")
    new_password: str = Field(..., min_length=8, max_length=100, description="新しいパスワード（8文字以上）")
