"""
Notification API エンドポイント
アプリ内通知の取得・既読化・削除
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.database import get_db
from app.models.notification import Notification
from app.models.user import User
from app.schemas.base import MessageResponse
from app.schemas.notification import (
    MarkReadRequest,
    NotificationListResponse,
    NotificationResponse,
)
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListResponse)
def get_notifications(
    unread: bool = Query(False, description="未読のみ取得"),
    limit: int = Query(50, ge=1, le=100, description="取得件数"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    通知一覧を取得（新しい順、未読件数付き）
    """
    service = NotificationService(db)
    notifications = service.get_notifications(current_user.id, unread_only=unread, limit=limit)

    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        unread_count=service.count_unread(current_user.id),
    )


@router.post("/read", response_model=MessageResponse)
def mark_notifications_read(
    request: MarkReadRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    通知を既読にする

    - notification_ids: 指定した通知のみ
    - mark_all_read: すべて
    """
    if not request.mark_all_read and not request.notification_ids:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="notification_ids または mark_all_read を指定してください",
        )

    ids = None if request.mark_all_read else request.notification_ids
    updated = NotificationService(db).mark_as_read(current_user.id, ids)

    return MessageResponse(success=True, message=f"{updated}件の通知を既読にしました")


@router.delete("/{notification_id}", response_model=MessageResponse)
def delete_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """自分の通知のみ削除できる"""
    notification = (
        db.query(Notification)
        .filter(
            Notification.id == notification_id,
            Notification.user_id == current_user.id,
        )
        .first()
    )
    if not notification:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="通知が見つかりません"
        )

    db.delete(notification)
    db.commit()
    return MessageResponse(success=True, message="通知を削除しました")
