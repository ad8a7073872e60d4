"""
User Settings API - ユーザー設定管理
プロフィール・パスワード・アカウントの管理
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.auth import get_current_user, hash_password, verify_password
from app.schemas.base import MessageResponse
from app.schemas.user import PasswordChangeRequest, ProfileUpdateRequest, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/user", tags=["User Settings"])

AUTH_ERROR_RESPONSE = {
    "description": "認証エラー",
    "content": {
        "application/json": {
            "example": {"detail": "認証トークンが必要です"}
        }
    }
}


# ============================================
# プロフィール
# ============================================

@router.get(
    "/profile",
    response_model=UserResponse,
    summary="プロフィール取得",
    description="""
ログインユーザーのプロフィール情報を取得します。

## 認証
`Authorization: Bearer {token}` ヘッダー、または auth-token Cookie が必要です。
""",
    responses={401: AUTH_ERROR_RESPONSE}
)
def get_profile(current_user: User = Depends(get_current_user)):
    """プロフィール取得エンドポイント"""
    return UserResponse.model_validate(current_user)


@router.put(
    "/profile",
    response_model=UserResponse,
    summary="プロフィール更新",
    description="""
表示名・国・自己紹介を更新します。指定した項目のみ変更されます。
""",
    responses={401: AUTH_ERROR_RESPONSE}
)
def update_profile(
    request: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """プロフィール更新エンドポイント"""
    for field, value in request.model_dump(exclude_unset=True).items():
        setattr(current_user, field, value)

    db.commit()
    db.refresh(current_user)

    return UserResponse.model_validate(current_user)


# ============================================
# パスワード・アカウント
# ============================================

@router.put(
    "/password",
    response_model=MessageResponse,
    summary="パスワード変更",
    description="""
ログインユーザーのパスワードを変更します。

## パスワード要件
- 新しいパスワードは8文字以上
- 現在のパスワードの検証が必要
""",
    responses={
        400: {
            "description": "現在のパスワードが不正",
            "content": {
                "application/json": {
                    "example": {"detail": "現在のパスワードが正しくありません"}
                }
            }
        },
        401: AUTH_ERROR_RESPONSE
    }
)
def change_password(
    request: PasswordChangeRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """パスワード変更エンドポイント"""
    if not verify_password(request.current_password, current_user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="現在のパスワードが正しくありません"
        )

    current_user.password_hash = hash_password(request.new_password)
    db.commit()

    return MessageResponse(
        success=True,
        message="パスワードを変更しました"
    )


@router.delete(
    "/account",
    response_model=MessageResponse,
    summary="アカウント削除",
    description="""
ログインユーザーのアカウントを削除します。

## 注意
- この操作は取り消せません
- コレクション・リスト・レビュー・通知も削除されます
""",
    responses={401: AUTH_ERROR_RESPONSE}
)
def delete_account(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """アカウント削除エンドポイント"""
    user_id = current_user.id
    db.delete(current_user)
    db.commit()

    logger.info(f"アカウント削除: {user_id}")
    return MessageResponse(
        success=True,
        message="アカウントを削除しました"
    )
