"""
Inventory (コレクション) API スキーマ定義
"""
from datetime import datetime
from typing import Optional, List, Dict

from pydantic import BaseModel, Field

from .base import BaseSchema
from .figure import FigureSummary

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class InventoryCreate(BaseModel):
    """コレクション追加リクエスト（必須項目の欠落は 400）"""
    figure_id: Optional[str] = Field(None, description="フィギュアID")
    status: Optional[str] = Field(None, description="WISHLIST / PREORDER / OWNED")
    user_price: Optional[float] = Field(None, ge=0, description="購入価格")
    preorder_month: Optional[str] = Field(None, pattern=MONTH_PATTERN, description="予約月（YYYY-MM）")


class InventoryUpdate(BaseModel):
    status: Optional[str] = None
    user_price: Optional[float] = Field(None, ge=0)
    preorder_month: Optional[str] = Field(None, pattern=MONTH_PATTERN)


class InventoryItemResponse(BaseSchema):
    id: str
    status: str
    user_price: Optional[float] = None
    preorder_month: Optional[str] = None
    figure: FigureSummary
    created_at: Optional[datetime] = None


class InventoryListResponse(BaseModel):
    """コレクション一覧（ステータス別件数つき）"""
    items: List[InventoryItemResponse]
    totals: Dict[str, int]
