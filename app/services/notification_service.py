"""
通知サービス
発売・承認イベントのアプリ内通知作成、一覧取得、既読管理を担当
"""
import logging
from typing import Optional, List, Dict, Any
from sqlalchemy.orm import Session

from app.config import settings
from app.models.base import InventoryStatus
from app.models.figure import Figure
from app.models.notification import Notification
from app.models.user_figure import UserFigure
from app.services.email_service import email_service

logger = logging.getLogger(__name__)

FIGURE_RELEASED = "FIGURE_RELEASED"
CONTENT_APPROVED = "CONTENT_APPROVED"

# 発売通知の対象となるコレクション状態
RELEASE_WATCH_STATUSES = [InventoryStatus.WISHLIST.value, InventoryStatus.PREORDER.value]

# 承認通知で使う種別名
CONTENT_LABELS = {
    "figure": "figura",
    "brand": "marca",
    "line": "línea",
    "series": "serie",
    "character": "personaje",
}


class NotificationService:
    """通知サービスクラス"""

    def __init__(self, db: Session):
        self.db = db

    def notify_figure_released(self, figure: Figure, commit: bool = True) -> List[Dict[str, Any]]:
        """
        発売されたフィギュアをウィッシュリスト・予約中のユーザーへ通知

        Parameters:
            figure: 発売済みになったフィギュア
            commit: True の場合この中でコミットする

        Returns:
            送信結果のリスト
        """
        holders = self.db.query(UserFigure).filter(
            UserFigure.figure_id == figure.id,
            UserFigure.status.in_(RELEASE_WATCH_STATUSES)
        ).all()

        results = []
        link = f"/catalog/{figure.id}"

        for holder in holders:
            notification = Notification(
                user_id=holder.user_id,
                type=FIGURE_RELEASED,
                title="¡Figura lanzada!",
                message=f"{figure.name} ya está disponible.",
                link=link,
                figure_id=figure.id,
                is_read=False,
            )
            self.db.add(notification)

            email_result = {"success": False}
            if settings.EMAIL_ENABLED and holder.user and holder.user.email:
                email_result = email_service.send_figure_released_email(
                    to=holder.user.email,
                    figure_name=figure.name,
                    figure_url=f"{settings.FRONTEND_URL}{link}",
                    image_url=figure.image,
                )

            results.append({
                "user_id": holder.user_id,
                "figure_id": figure.id,
                "status": holder.status,
                "email_sent": email_result.get("success", False),
            })

        if commit:
            self.db.commit()

        logger.info(f"発売通知作成: figure={figure.name[:30]}, users={len(results)}")
        return results

    def notify_content_approved(
        self,
        user_id: Optional[str],
        content_type: str,
        name: str,
        link: Optional[str] = None,
        figure_id: Optional[str] = None,
    ) -> Optional[Notification]:
        """投稿者へ承認を通知（投稿者不明の場合は何もしない）"""
        if not user_id:
            return None

        label = CONTENT_LABELS.get(content_type, content_type)
        notification = Notification(
            user_id=user_id,
            type=CONTENT_APPROVED,
            title="Contenido aprobado",
            message=f"Tu {label} \"{name}\" fue aprobada y ya es pública.",
            link=link,
            figure_id=figure_id,
            is_read=False,
        )
        self.db.add(notification)
        return notification

    def get_notifications(
        self,
        user_id: str,
        unread_only: bool = False,
        limit: int = 50
    ) -> List[Notification]:
        """ユーザーの通知を新しい順に取得"""
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.is_read == False)  # noqa: E712
        return query.order_by(Notification.created_at.desc()).limit(limit).all()

    def count_unread(self, user_id: str) -> int:
        return self.db.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.is_read == False  # noqa: E712
        ).count()

    def mark_as_read(self, user_id: str, notification_ids: Optional[List[str]] = None) -> int:
        """
        通知を既読にする

        notification_ids が None の場合は未読をすべて既読にする

        Returns:
            更新件数
        """
        query = self.db.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.is_read == False  # noqa: E712
        )
        if notification_ids is not None:
            query = query.filter(Notification.id.in_(notification_ids))

        updated = query.update({Notification.is_read: True}, synchronize_session=False)
        self.db.commit()
        return updated

