"""
Calendar / Timeline API スキーマ定義
"""
from typing import Optional, List

from pydantic import BaseModel

from .base import BaseSchema
from .figure import FigureSummary


class CalendarEntry(BaseSchema):
    id: str
    figure: FigureSummary
    user_price: Optional[float] = None
    preorder_month: Optional[str] = None
    price: Optional[float] = None


class CalendarMonth(BaseModel):
    """月ごとの予約まとめ"""
    month: str  # YYYY-MM または TBA
    label: str
    items: List[CalendarEntry]
    total: float


class CalendarResponse(BaseModel):
    months: List[CalendarMonth]
    total_value: float
    total_count: int


class ReleasesResponse(BaseModel):
    year: int
    month: int
    label: str
    figures: List[FigureSummary]
    total: int


class TimelineResponse(BaseModel):
    figures: List[FigureSummary]
    total: int
