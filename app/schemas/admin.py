"""
Admin API スキーマ定義
"""
from datetime import datetime
from typing import Any, Optional, List, Dict

from pydantic import BaseModel, Field

from .base import BaseSchema
from .user import UserPublic


class PendingItem(BaseModel):
    id: str
    type: str
    name: str
    created_by: Optional[UserPublic] = None
    created_at: Optional[datetime] = None
    extra: Dict[str, Any] = {}


class PendingResponse(BaseModel):
    """承認待ちコンテンツ（件数は常に含む）"""
    counts: Dict[str, int]
    figures: List[PendingItem] = []
    brands: List[PendingItem] = []
    lines: List[PendingItem] = []
    series: List[PendingItem] = []
    characters: List[PendingItem] = []


class ApproveRequest(BaseModel):
    """承認 / 却下リクエスト（不正値は 400）"""
    type: Optional[str] = Field(None, description="figure / brand / line / series / character")
    id: Optional[str] = None
    approved: Any = Field(None, description="true で承認 / false で承認待ちに戻す")


class AdminUserResponse(BaseSchema):
    id: str
    email: str
    username: str
    name: Optional[str] = None
    role: str
    is_pro: bool
    email_verified: bool
    created_at: Optional[datetime] = None
    collection_count: int = 0
    list_count: int = 0
    review_count: int = 0


class RoleUpdateRequest(BaseModel):
    role: Optional[str] = None


class SystemConfigRequest(BaseModel):
    key: str = Field(..., min_length=1)
    value: Any = None


class SystemConfigResponse(BaseModel):
    key: str
    value: Any = None
