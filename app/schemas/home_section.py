"""
Home Section API スキーマ定義
"""
import json
from datetime import datetime
from typing import Any, Literal, Optional, List, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.base import Currency, HomeSectionType
from app.services.catalog_service import SORT_OPTIONS
from .base import BaseSchema
from .figure import FigureSummary
from .figure_list import ListSummary


class HomeSectionConfig(BaseModel):
    """
    セクション設定（未知のキー・型違いは 422）

    QUERY:  brandId, lineId, seriesId, characterId, search, isReleased,
            minPrice, maxPrice, currency, sort, limit
    LIST:   listId, limit
    PRESET: preset, limit
    """
    model_config = ConfigDict(extra="forbid")

    brandId: Optional[str] = None
    lineId: Optional[str] = Field(None, description="カンマ区切りで複数指定可")
    seriesId: Optional[str] = Field(None, description="カンマ区切りで複数指定可")
    characterId: Optional[str] = None
    search: Optional[str] = Field(None, max_length=100)
    isReleased: Optional[bool] = None
    minPrice: Optional[float] = Field(None, ge=0)
    maxPrice: Optional[float] = Field(None, ge=0)
    currency: Optional[Currency] = None
    sort: Optional[str] = None
    listId: Optional[str] = None
    preset: Optional[Literal["recent", "upcoming", "featured_lists"]] = None
    limit: Optional[int] = Field(None, ge=1, le=24)

    @field_validator("sort")
    @classmethod
    def validate_sort(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in SORT_OPTIONS:
            raise ValueError(f"sort は {', '.join(SORT_OPTIONS)} のいずれかです")
        return v

    def to_json(self) -> str:
        """保存用JSON（未指定のキーは含めない）"""
        return json.dumps(self.model_dump(mode="json", exclude_none=True))


class HomeSectionCreate(BaseModel):
    """ホームセクション作成リクエスト"""
    title: str = Field(..., min_length=1, max_length=255)
    type: HomeSectionType
    config: HomeSectionConfig = Field(default_factory=HomeSectionConfig)
    view_all_url: Optional[str] = Field(None, max_length=500)
    is_visible: bool = True

    model_config = {
        "json_schema_extra": {
            "example": {
                "title": "Nendoroid 新作",
                "type": "QUERY",
                "config": {"lineId": "line-uuid", "isReleased": False, "limit": 6},
            }
        }
    }


class HomeSectionUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[HomeSectionType] = None
    config: Optional[HomeSectionConfig] = None
    view_all_url: Optional[str] = Field(None, max_length=500)
    is_visible: Optional[bool] = None
    order: Optional[int] = Field(None, ge=0)


class HomeSectionReorderRequest(BaseModel):
    """並び替えリクエスト。items がリストでなければ 400"""
    items: Any = None


class HomeSectionResponse(BaseSchema):
    id: str
    title: str
    type: str
    config: Dict[str, Any]
    view_all_url: Optional[str] = None
    is_visible: bool
    order: int
    created_at: Optional[datetime] = None

    @field_validator("config", mode="before")
    @classmethod
    def parse_config(cls, v: Any) -> Any:
        if isinstance(v, str):
            return json.loads(v) if v else {}
        return v


class ResolvedSection(BaseModel):
    """表示用に解決済みのセクション"""
    id: Optional[str] = None
    title: str
    type: str
    view_all_url: Optional[str] = None
    figures: List[FigureSummary] = []
    lists: List[ListSummary] = []


class HomeResponse(BaseModel):
    sections: List[ResolvedSection]
