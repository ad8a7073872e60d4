"""
Notification API スキーマ定義
"""
from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field

from .base import BaseSchema


class NotificationResponse(BaseSchema):
    id: str
    type: str
    title: str
    message: str
    link: Optional[str] = None
    figure_id: Optional[str] = None
    is_read: bool
    created_at: Optional[datetime] = None


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]
    unread_count: int


class MarkReadRequest(BaseModel):
    """既読化リクエスト（ID指定 または 全件）"""
    notification_ids: Optional[List[str]] = Field(None, description="既読にする通知ID")
    mark_all_read: bool = Field(False, description="すべて既読にする")
