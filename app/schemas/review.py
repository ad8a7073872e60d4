"""
Review API スキーマ定義
"""
from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field

from .base import BaseSchema
from .user import UserPublic
from .figure import ImageResponse

MAX_REVIEW_IMAGES = 5


class ReviewCreate(BaseModel):
    """レビュー投稿リクエスト"""
    figure_id: str = Field(..., description="フィギュアID")
    rating: int = Field(..., ge=1, le=5, description="評価（1〜5）")
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    images: List[str] = Field(default_factory=list, description=f"画像URL（最大{MAX_REVIEW_IMAGES}枚）")


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    images: Optional[List[str]] = None


class ReviewFigure(BaseSchema):
    id: str
    name: str
    image: Optional[str] = None


class ReviewResponse(BaseSchema):
    id: str
    rating: int
    title: str
    description: str
    user: UserPublic
    figure: ReviewFigure
    images: List[ImageResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
