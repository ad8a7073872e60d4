"""依存注入モジュール"""
from typing import Optional
from fastapi import Cookie, Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from app.auth import AUTH_COOKIE_NAME, decode_user, extract_token, get_current_user
from app.database import get_db
from app.models.base import UserRole
from app.models.user import User

ADMIN_ROLES = (UserRole.ADMIN.value, UserRole.SUPERADMIN.value)


def is_admin(role: Optional[str]) -> bool:
    """ADMIN / SUPERADMIN なら True"""
    return role in ADMIN_ROLES


def is_superadmin(role: Optional[str]) -> bool:
    return role == UserRole.SUPERADMIN.value


def get_optional_user(
    authorization: Optional[str] = Header(None),
    auth_token: Optional[str] = Cookie(None, alias=AUTH_COOKIE_NAME),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """
    ログインしていればユーザーを返す
    公開エンドポイントで管理者・作成者向けの表示を切り替えるために使う
    """
    token = extract_token(authorization, auth_token)
    if not token:
        return None
    return decode_user(token, db)


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """管理者権限チェック"""
    if not is_admin(current_user.role):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="管理者権限が必要です",
        )
    return current_user


def require_superadmin(current_user: User = Depends(get_current_user)) -> User:
    """スーパー管理者権限チェック"""
    if not is_superadmin(current_user.role):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="スーパー管理者権限が必要です",
        )
    return current_user
