"""
List API スキーマ定義
"""
from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field

from .base import BaseSchema
from .user import UserPublic
from .figure import FigureSummary


class ListCreate(BaseModel):
    """リスト作成リクエスト"""
    name: str = Field(..., min_length=1, max_length=255, description="リスト名")
    description: Optional[str] = None
    is_official: bool = Field(False, description="公式リスト（管理者のみ有効）")


class ListUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    is_official: Optional[bool] = None
    is_featured: Optional[bool] = None


class ListItemAdd(BaseModel):
    figure_id: str = Field(..., description="フィギュアID")


class ListReorderRequest(BaseModel):
    figure_ids: List[str] = Field(..., description="新しい並び順のフィギュアID")


class ListItemResponse(BaseSchema):
    id: str
    order: int
    figure: FigureSummary


class ListSummary(BaseSchema):
    """一覧表示用（先頭5件のプレビュー付き）"""
    id: str
    name: str
    description: Optional[str] = None
    is_official: bool
    is_featured: bool
    created_by: UserPublic
    item_count: int = 0
    preview: List[FigureSummary] = []
    created_at: Optional[datetime] = None


class ListDetail(ListSummary):
    items: List[ListItemResponse] = []
