"""
Figure API スキーマ定義
"""
from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field, field_validator

from app.models.base import Currency
from app.utils import parse_release_date
from .base import BaseSchema
from .user import UserPublic
from .taxonomy import (
    BrandRef,
    LineRef,
    SeriesRef,
    CharacterRef,
    BrandResponse,
    LineResponse,
    SeriesResponse,
    CharacterResponse,
)


# ============================================
# リクエストスキーマ
# ============================================
class FigureFields(BaseSchema):
    """作成・更新で共通のフィールド"""
    description: Optional[str] = None
    sku: Optional[str] = Field(None, max_length=100)
    size: Optional[str] = Field(None, max_length=50)
    height_cm: Optional[float] = Field(None, ge=0)
    width_cm: Optional[float] = Field(None, ge=0)
    depth_cm: Optional[float] = Field(None, ge=0)
    scale: Optional[str] = Field(None, max_length=50)
    material: Optional[str] = Field(None, max_length=255)
    maker: Optional[str] = Field(None, max_length=255)
    price_mxn: Optional[float] = Field(None, ge=0)
    price_usd: Optional[float] = Field(None, ge=0)
    price_yen: Optional[float] = Field(None, ge=0)
    release_date: Optional[str] = Field(
        None, description="発売日（YYYY / YYYY-MM / YYYY-MM-DD）"
    )
    character_id: Optional[str] = None
    is_nsfw: Optional[bool] = None

    @field_validator("release_date")
    @classmethod
    def validate_release_date(cls, v: Optional[str]) -> Optional[str]:
        if v:
            parse_release_date(v)
        return v or None


class FigureCreate(FigureFields):
    """フィギュア作成リクエスト

    name / brand_id / line_id の欠落は 400 として扱うため Optional
    """
    name: Optional[str] = Field(None, max_length=500)
    brand_id: Optional[str] = None
    line_id: Optional[str] = None
    original_price_currency: Currency = Currency.YEN
    is_released: bool = False
    images: List[str] = Field(default_factory=list, description="画像URL（表示順）")
    tag_ids: List[str] = Field(default_factory=list)
    series_ids: List[str] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Nendoroid Hatsune Miku",
                "brand_id": "brand-uuid",
                "line_id": "line-uuid",
                "price_yen": 5800,
                "release_date": "2025-03",
                "images": ["https://example.com/miku.jpg"],
            }
        }
    }


class FigureUpdate(FigureFields):
    """フィギュア更新リクエスト（指定された項目のみ置き換え）"""
    name: Optional[str] = Field(None, min_length=1, max_length=500)
    brand_id: Optional[str] = None
    line_id: Optional[str] = None
    original_price_currency: Optional[Currency] = None
    is_released: Optional[bool] = None
    images: Optional[List[str]] = None
    tag_ids: Optional[List[str]] = None
    series_ids: Optional[List[str]] = None


class FigurePatch(BaseModel):
    """発売済み・NSFWフラグのみの更新"""
    is_released: Optional[bool] = None
    is_nsfw: Optional[bool] = None


class VariantCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=500, description="バリエーション名")
    price_mxn: Optional[float] = Field(None, ge=0)
    price_usd: Optional[float] = Field(None, ge=0)
    price_yen: Optional[float] = Field(None, ge=0)
    images: List[str] = Field(default_factory=list)


# ============================================
# レスポンススキーマ
# ============================================
class ImageResponse(BaseSchema):
    id: str
    url: str
    order: int


class TagRef(BaseSchema):
    id: str
    name: str


class VariantResponse(BaseSchema):
    id: str
    name: str
    price_mxn: Optional[float] = None
    price_usd: Optional[float] = None
    price_yen: Optional[float] = None
    images: List[ImageResponse] = []


class FigureSummary(BaseSchema):
    """一覧表示用のフィギュア情報"""
    id: str
    name: str
    image: Optional[str] = None
    brand: BrandRef
    line: LineRef
    price_mxn: Optional[float] = None
    price_usd: Optional[float] = None
    price_yen: Optional[float] = None
    original_price_currency: str
    release_year: Optional[int] = None
    release_month: Optional[int] = None
    release_day: Optional[int] = None
    release_date: Optional[str] = None
    is_released: bool
    is_nsfw: bool
    status: str
    created_at: Optional[datetime] = None


class FigureReview(BaseSchema):
    id: str
    rating: int
    title: str
    description: str
    user: UserPublic
    images: List[ImageResponse] = []
    created_at: Optional[datetime] = None


class DimensionsResponse(BaseModel):
    unit: str
    height: Optional[float] = None
    width: Optional[float] = None
    depth: Optional[float] = None
    formatted: str


class FigureDetail(FigureSummary):
    """フィギュア詳細"""
    description: Optional[str] = None
    sku: Optional[str] = None
    size: Optional[str] = None
    height_cm: Optional[float] = None
    width_cm: Optional[float] = None
    depth_cm: Optional[float] = None
    scale: Optional[str] = None
    material: Optional[str] = None
    maker: Optional[str] = None
    character: Optional[CharacterRef] = None
    images: List[ImageResponse] = []
    tags: List[TagRef] = []
    series: List[SeriesRef] = []
    variants: List[VariantResponse] = []
    reviews: List[FigureReview] = []
    created_by: Optional[UserPublic] = None
    approved_by: Optional[UserPublic] = None
    approved_at: Optional[datetime] = None
    formatted_price: Optional[str] = None
    review_count: int = 0
    owner_count: int = 0
    wishlist_count: int = 0
    avg_rating: Optional[float] = None
    dimensions: Optional[DimensionsResponse] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class FigureListResponse(BaseModel):
    """カタログ一覧レスポンス"""
    figures: List[FigureSummary]
    pagination: Pagination


class FacetItem(BaseModel):
    id: str
    name: str
    slug: str
    figure_count: int


class LineFacet(FacetItem):
    brand_id: str


class SeriesFacet(FacetItem):
    brand_ids: List[str] = []
    line_ids: List[str] = []


class FacetsResponse(BaseModel):
    """カタログの絞り込み候補"""
    brands: List[FacetItem]
    lines: List[LineFacet]
    series: List[SeriesFacet]


# ============================================
# 分類詳細（所属フィギュアを含む）
# ============================================
class BrandDetail(BrandResponse):
    lines: List[LineRef] = []
    figures: List[FigureSummary] = []


class LineDetail(LineResponse):
    figures: List[FigureSummary] = []


class SeriesDetail(SeriesResponse):
    characters: List[CharacterRef] = []
    figures: List[FigureSummary] = []


class CharacterDetail(CharacterResponse):
    figures: List[FigureSummary] = []


class SearchResult(BaseModel):
    id: str
    name: str
    type: str  # figure / brand / line / series
    image: Optional[str] = None
    subtitle: Optional[str] = None
    path: str


class SearchResponse(BaseModel):
    results: List[SearchResult]
