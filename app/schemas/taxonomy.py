"""
Brand / Line / Series / Character / Tag schemas
"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import BaseSchema
from .user import UserPublic


# ============================================
# 参照用（他スキーマに埋め込む）
# ============================================
class BrandRef(BaseSchema):
    id: str
    name: str
    slug: str


class LineRef(BaseSchema):
    id: str
    name: str
    slug: str
    brand_id: str


class SeriesRef(BaseSchema):
    id: str
    name: str
    slug: str


class CharacterRef(BaseSchema):
    id: str
    name: str
    slug: str
    series_id: Optional[str] = None


class TagResponse(BaseSchema):
    id: str
    name: str
    figure_count: int = 0


# ============================================
# リクエストスキーマ
# ============================================
class BrandCreate(BaseSchema):
    """ブランド作成リクエスト"""
    name: str = Field(..., min_length=1, max_length=255, description="ブランド名")
    description: Optional[str] = None
    country: Optional[str] = Field(None, max_length=100)
    logo_url: Optional[str] = Field(None, max_length=500)


class BrandUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    country: Optional[str] = Field(None, max_length=100)
    logo_url: Optional[str] = Field(None, max_length=500)


class LineCreate(BaseSchema):
    """製品ライン作成リクエスト"""
    name: str = Field(..., min_length=1, max_length=255, description="ライン名")
    brand_id: str = Field(..., description="ブランドID")
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=1000)
    release_year: Optional[int] = Field(None, ge=1900, le=2100)


class LineUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    brand_id: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=1000)
    release_year: Optional[int] = Field(None, ge=1900, le=2100)


class SeriesCreate(BaseSchema):
    """作品作成リクエスト"""
    name: str = Field(..., min_length=1, max_length=255, description="作品名")
    description: Optional[str] = None


class SeriesUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None


class CharacterCreate(BaseSchema):
    """キャラクター作成リクエスト"""
    name: str = Field(..., min_length=1, max_length=255, description="キャラクター名")
    series_id: Optional[str] = Field(None, description="作品ID")
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=1000)


class CharacterUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    series_id: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=1000)


class TagCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=100, description="タグ名")


# ============================================
# レスポンススキーマ
# ============================================
class BrandResponse(BaseSchema):
    """ブランド一覧レスポンス"""
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    country: Optional[str] = None
    logo_url: Optional[str] = None
    status: str
    created_by: Optional[UserPublic] = None
    created_at: Optional[datetime] = None
    figure_count: int = 0
    line_count: int = 0


class LineResponse(BaseSchema):
    """製品ライン一覧レスポンス"""
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    release_year: Optional[int] = None
    brand: BrandRef
    status: str
    created_by: Optional[UserPublic] = None
    created_at: Optional[datetime] = None
    figure_count: int = 0


class SeriesResponse(BaseSchema):
    """作品一覧レスポンス"""
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    status: str
    created_by: Optional[UserPublic] = None
    created_at: Optional[datetime] = None
    figure_count: int = 0


class CharacterResponse(BaseSchema):
    """キャラクター一覧レスポンス"""
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    series: Optional[SeriesRef] = None
    status: str
    created_by: Optional[UserPublic] = None
    created_at: Optional[datetime] = None
    figure_count: int = 0
