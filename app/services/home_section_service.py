"""
ホームセクションサービス
保存されたJSON設定を表示時にフィギュア / リストへ解決する

config のキー:
    QUERY:  brandId, lineId, seriesId, characterId, search, isReleased,
            minPrice, maxPrice, currency, sort, limit
    LIST:   listId, limit
    PRESET: preset（recent / upcoming / featured_lists）, limit
"""
import json
import logging
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import urlencode
from sqlalchemy.orm import Session

from app.models.base import Currency, HomeSectionType
from app.models.figure import Figure
from app.models.figure_list import FigureList
from app.models.home_section import HomeSection
from app.schemas.figure import FigureSummary
from app.schemas.home_section import ResolvedSection
from app.services.catalog_service import (
    APPROVED_ONLY,
    apply_sort,
    figure_query,
    release_order,
    split_ids,
)
from app.services.list_service import featured_lists, list_summary

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 6
MAX_LIMIT = 24
FEATURED_LIST_LIMIT = 3

PRESET_RECENT = "recent"
PRESET_UPCOMING = "upcoming"
PRESET_FEATURED_LISTS = "featured_lists"
PRESETS = [PRESET_RECENT, PRESET_UPCOMING, PRESET_FEATURED_LISTS]

PRESET_VIEW_ALL = {
    PRESET_RECENT: "/catalog",
    PRESET_UPCOMING: "/calendar",
    PRESET_FEATURED_LISTS: "/lists",
}

# QUERY設定キー → カタログURLのクエリパラメータ
QUERY_PARAM_MAP = {
    "brandId": "brand_id",
    "lineId": "line_id",
    "seriesId": "series_id",
    "characterId": "character_id",
    "search": "search",
    "isReleased": "is_released",
    "minPrice": "min_price",
    "maxPrice": "max_price",
    "currency": "currency",
}


def parse_config(raw: Optional[str]) -> Dict[str, Any]:
    """JSON設定を辞書に変換（不正な場合は空）"""
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning(f"ホームセクション設定のJSONが不正です: {raw[:50]}")
        return {}
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    """文字列以外（配列など）は未指定扱い"""
    return value if isinstance(value, str) and value else None


def _as_bool(value: Any) -> Optional[bool]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    return str(value).lower() == "true"


def _as_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _limit(config: Dict[str, Any]) -> int:
    try:
        value = int(config.get("limit", DEFAULT_LIMIT))
    except (TypeError, ValueError):
        value = DEFAULT_LIMIT
    return max(1, min(value, MAX_LIMIT))


def build_view_all_url(section_type: str, config: Dict[str, Any]) -> Optional[str]:
    """「すべて見る」リンクを設定から生成"""
    if section_type == HomeSectionType.QUERY.value:
        params = {
            param: str(config[key]).lower() if isinstance(config[key], bool) else config[key]
            for key, param in QUERY_PARAM_MAP.items()
            if config.get(key) not in (None, "")
        }
        return f"/catalog?{urlencode(params)}" if params else "/catalog"
    if section_type == HomeSectionType.LIST.value:
        list_id = config.get("listId")
        return f"/lists/{list_id}" if list_id else None
    if section_type == HomeSectionType.PRESET.value:
        return PRESET_VIEW_ALL.get(_as_str(config.get("preset")))
    return None


class HomeSectionResolver:
    """ホームセクションを表示用データに解決するクラス"""

    def __init__(self, db: Session, statuses: Sequence[str] = APPROVED_ONLY):
        self.db = db
        self.statuses = list(statuses)

    def resolve_page(self) -> List[ResolvedSection]:
        """表示対象のセクションを順番に解決（未設定ならデフォルト構成）"""
        sections = (
            self.db.query(HomeSection)
            .filter(HomeSection.is_visible == True)  # noqa: E712
            .order_by(HomeSection.order.asc())
            .all()
        )
        if not sections:
            return self.default_sections()
        return [self.resolve(section) for section in sections]

    def resolve(self, section: HomeSection) -> ResolvedSection:
        config = parse_config(section.config)
        resolved = ResolvedSection(
            id=section.id,
            title=section.title,
            type=section.type,
            view_all_url=section.view_all_url or build_view_all_url(section.type, config),
        )

        if section.type == HomeSectionType.QUERY.value:
            resolved.figures = self._summaries(self.query_figures(config))
        elif section.type == HomeSectionType.LIST.value:
            resolved.figures = self._summaries(self.list_figures(config))
        elif section.type == HomeSectionType.PRESET.value:
            preset = _as_str(config.get("preset"))
            if preset == PRESET_FEATURED_LISTS:
                limit = _limit(config) if "limit" in config else FEATURED_LIST_LIMIT
                resolved.lists = [list_summary(lst) for lst in featured_lists(self.db, limit)]
            else:
                resolved.figures = self._summaries(self.preset_figures(preset, _limit(config)))
        else:
            logger.warning(f"未知のセクション種別: {section.type}")

        return resolved

    def query_figures(self, config: Dict[str, Any]) -> List[Figure]:
        """QUERY設定をカタログ検索として実行"""
        currency = _as_str(config.get("currency")) or Currency.MXN.value
        query = figure_query(
            self.db,
            statuses=self.statuses,
            brand_id=_as_str(config.get("brandId")),
            line_ids=split_ids(_as_str(config.get("lineId"))),
            series_ids=split_ids(_as_str(config.get("seriesId"))),
            character_id=_as_str(config.get("characterId")),
            search=_as_str(config.get("search")),
            is_released=_as_bool(config.get("isReleased")),
            min_price=_as_float(config.get("minPrice")),
            max_price=_as_float(config.get("maxPrice")),
            currency=currency,
        )
        return apply_sort(query, _as_str(config.get("sort")), currency).limit(_limit(config)).all()

    def list_figures(self, config: Dict[str, Any]) -> List[Figure]:
        """LIST設定のリスト項目をリスト内の順番で返す"""
        list_id = _as_str(config.get("listId"))
        if not list_id:
            return []
        figure_list = self.db.query(FigureList).filter(FigureList.id == list_id).first()
        if figure_list is None:
            logger.warning(f"ホームセクションのリストが見つかりません: {list_id}")
            return []
        figures = [item.figure for item in figure_list.items if item.figure.status in self.statuses]
        return figures[:_limit(config)]

    def preset_figures(self, preset: Optional[str], limit: int) -> List[Figure]:
        if preset == PRESET_UPCOMING:
            return self.upcoming_figures(limit)
        if preset == PRESET_RECENT:
            return self.recent_figures(limit)
        logger.warning(f"未知のプリセット: {preset}")
        return []

    def upcoming_figures(self, limit: int = DEFAULT_LIMIT) -> List[Figure]:
        """発売日が決まっている未発売フィギュア（発売日順）"""
        return (
            figure_query(self.db, statuses=self.statuses, is_released=False)
            .filter(Figure.release_year.isnot(None))
            .order_by(*release_order(), Figure.name.asc())
            .limit(limit)
            .all()
        )

    def recent_figures(self, limit: int = DEFAULT_LIMIT) -> List[Figure]:
        return (
            figure_query(self.db, statuses=self.statuses)
            .order_by(Figure.created_at.desc(), Figure.id.asc())
            .limit(limit)
            .all()
        )

    def default_sections(self) -> List[ResolvedSection]:
        """セクション未設定時のホーム構成"""
        return [
            ResolvedSection(
                title="Listas destacadas",
                type=HomeSectionType.PRESET.value,
                view_all_url=PRESET_VIEW_ALL[PRESET_FEATURED_LISTS],
                lists=[list_summary(lst) for lst in featured_lists(self.db, FEATURED_LIST_LIMIT)],
            ),
            ResolvedSection(
                title="Próximos lanzamientos",
                type=HomeSectionType.PRESET.value,
                view_all_url=PRESET_VIEW_ALL[PRESET_UPCOMING],
                figures=self._summaries(self.upcoming_figures()),
            ),
            ResolvedSection(
                title="Agregadas recientemente",
                type=HomeSectionType.PRESET.value,
                view_all_url=PRESET_VIEW_ALL[PRESET_RECENT],
                figures=self._summaries(self.recent_figures()),
            ),
        ]

    @staticmethod
    def _summaries(figures: List[Figure]) -> List[FigureSummary]:
        return [FigureSummary.model_validate(f) for f in figures]
