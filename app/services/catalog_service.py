"""
カタログサービス
フィギュア一覧の絞り込み・並び替え・ページング、ファセット集計を担当
"""
import logging
import math
from typing import Any, Dict, List, Optional, Sequence, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session, Query

from app.models.base import ContentStatus, Currency, UserRole
from app.models.brand import Brand
from app.models.figure import Figure, figure_series
from app.models.line import Line
from app.models.series import Series
from app.models.tag import Tag
from app.models.user import User
from app.services.cache_service import catalog_cache, FACETS_CACHE_KEY
from app.services.system_config_service import show_pending_figures

logger = logging.getLogger(__name__)

SORT_OPTIONS = ["newest", "date_asc", "date_desc", "price_asc", "price_desc"]

PRICE_COLUMNS = {
    Currency.MXN.value: Figure.price_mxn,
    Currency.USD.value: Figure.price_usd,
    Currency.YEN.value: Figure.price_yen,
}

APPROVED_ONLY = [ContentStatus.APPROVED.value]
ALL_STATUSES = [ContentStatus.PENDING.value, ContentStatus.APPROVED.value]


def split_ids(value: Optional[str]) -> List[str]:
    """カンマ区切りのIDリストを分解"""
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def is_admin_user(user: Optional[User]) -> bool:
    return user is not None and user.role in (UserRole.ADMIN.value, UserRole.SUPERADMIN.value)


def visible_statuses(include_pending: bool, user: Optional[User]) -> List[str]:
    """分類一覧で表示するステータス（承認待ちは管理者が明示した場合のみ）"""
    if include_pending and is_admin_user(user):
        return ALL_STATUSES
    return APPROVED_ONLY


def visible_figure_statuses(
    db: Session,
    user: Optional[User] = None,
    include_pending: bool = False,
) -> List[str]:
    """カタログに表示するフィギュアのステータス"""
    if include_pending and is_admin_user(user):
        return ALL_STATUSES
    if show_pending_figures(db):
        return ALL_STATUSES
    return APPROVED_ONLY


def figure_query(
    db: Session,
    statuses: Sequence[str] = APPROVED_ONLY,
    brand_id: Optional[str] = None,
    line_ids: Optional[List[str]] = None,
    series_ids: Optional[List[str]] = None,
    character_id: Optional[str] = None,
    tag_id: Optional[str] = None,
    search: Optional[str] = None,
    is_released: Optional[bool] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    currency: str = Currency.MXN.value,
) -> Query:
    """絞り込み条件からフィギュアのクエリを組み立てる"""
    query = db.query(Figure).filter(Figure.status.in_(list(statuses)))

    if brand_id:
        query = query.filter(Figure.brand_id == brand_id)
    if line_ids:
        query = query.filter(Figure.line_id.in_(line_ids))
    if series_ids:
        query = query.filter(Figure.series.any(Series.id.in_(series_ids)))
    if character_id:
        query = query.filter(Figure.character_id == character_id)
    if tag_id:
        query = query.filter(Figure.tags.any(Tag.id == tag_id))
    if search:
        # 部分一致検索（% と _ は文字として扱う）
        query = query.filter(Figure.name.icontains(search.strip(), autoescape=True))
    if is_released is not None:
        query = query.filter(Figure.is_released == is_released)

    price_column = PRICE_COLUMNS.get(currency, Figure.price_mxn)
    if min_price is not None:
        query = query.filter(price_column >= min_price)
    if max_price is not None:
        query = query.filter(price_column <= max_price)

    return query


def release_order(descending: bool = False) -> list:
    """発売日順（日付未定は常に末尾）"""
    columns = [Figure.release_year, Figure.release_month, Figure.release_day]
    order = []
    for column in columns:
        order.append(column.is_(None))
        order.append(column.desc() if descending else column.asc())
    return order


def apply_sort(query: Query, sort: Optional[str], currency: str = Currency.MXN.value) -> Query:
    """並び替えを適用"""
    if sort == "date_asc":
        return query.order_by(*release_order(), Figure.name.asc())
    if sort == "date_desc":
        return query.order_by(*release_order(descending=True), Figure.name.asc())
    if sort in ("price_asc", "price_desc"):
        price_column = PRICE_COLUMNS.get(currency, Figure.price_mxn)
        direction = price_column.asc() if sort == "price_asc" else price_column.desc()
        return query.order_by(price_column.is_(None), direction, Figure.name.asc())
    return query.order_by(Figure.created_at.desc(), Figure.id.asc())


def paginate(query: Query, page: int, limit: int) -> Tuple[List[Any], Dict[str, int]]:
    """ページング（件数とページ情報を返す）"""
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }


def count_figures_by(db: Session, column, statuses: Sequence[str] = APPROVED_ONLY) -> Dict[str, int]:
    """指定カラムごとのフィギュア件数"""
    rows = (
        db.query(column, func.count(Figure.id))
        .filter(Figure.status.in_(list(statuses)))
        .group_by(column)
        .all()
    )
    return {key: count for key, count in rows if key is not None}


def count_figures_by_series(db: Session, statuses: Sequence[str] = APPROVED_ONLY) -> Dict[str, int]:
    rows = (
        db.query(figure_series.c.series_id, func.count(Figure.id))
        .join(Figure, Figure.id == figure_series.c.figure_id)
        .filter(Figure.status.in_(list(statuses)))
        .group_by(figure_series.c.series_id)
        .all()
    )
    return {series_id: count for series_id, count in rows}


def get_facets(db: Session, statuses: Sequence[str] = APPROVED_ONLY) -> Dict[str, Any]:
    """
    カタログの絞り込み候補を集計（キャッシュ対応）

    作品ごとに所属フィギュアのブランドID・ラインIDも返し、
    クライアント側で候補を絞り込めるようにする
    """
    cache_key = f"{FACETS_CACHE_KEY}:{'+'.join(sorted(statuses))}"
    cached = catalog_cache.get(cache_key)
    if cached is not None:
        logger.info(f"キャッシュヒット: {cache_key}")
        return cached

    brand_counts = count_figures_by(db, Figure.brand_id, statuses)
    line_counts = count_figures_by(db, Figure.line_id, statuses)

    brands = (
        db.query(Brand)
        .filter(Brand.status == ContentStatus.APPROVED.value)
        .order_by(Brand.name)
        .all()
    )
    lines = (
        db.query(Line)
        .filter(Line.status == ContentStatus.APPROVED.value)
        .order_by(Line.name)
        .all()
    )
    series_list = (
        db.query(Series)
        .filter(Series.status == ContentStatus.APPROVED.value)
        .order_by(Series.name)
        .all()
    )

    series_brands: Dict[str, set] = {}
    series_lines: Dict[str, set] = {}
    rows = (
        db.query(figure_series.c.series_id, Figure.brand_id, Figure.line_id)
        .join(Figure, Figure.id == figure_series.c.figure_id)
        .filter(Figure.status.in_(list(statuses)))
        .all()
    )
    series_counts: Dict[str, int] = {}
    for series_id, brand_id, line_id in rows:
        series_counts[series_id] = series_counts.get(series_id, 0) + 1
        series_brands.setdefault(series_id, set()).add(brand_id)
        series_lines.setdefault(series_id, set()).add(line_id)

    facets = {
        "brands": [
            {"id": b.id, "name": b.name, "slug": b.slug, "figure_count": brand_counts.get(b.id, 0)}
            for b in brands
        ],
        "lines": [
            {
                "id": line.id,
                "name": line.name,
                "slug": line.slug,
                "brand_id": line.brand_id,
                "figure_count": line_counts.get(line.id, 0),
            }
            for line in lines
        ],
        "series": [
            {
                "id": s.id,
                "name": s.name,
                "slug": s.slug,
                "figure_count": series_counts.get(s.id, 0),
                "brand_ids": sorted(series_brands.get(s.id, set())),
                "line_ids": sorted(series_lines.get(s.id, set())),
            }
            for s in series_list
        ],
    }

    catalog_cache.set(cache_key, facets)
    logger.info(f"キャッシュ保存: {cache_key}")
    return facets


def slug_taken(db: Session, model, slug: str, exclude_id: Optional[str] = None) -> bool:
    """スラッグが既に使われているか"""
    query = db.query(model).filter(model.slug == slug)
    if exclude_id:
        query = query.filter(model.id != exclude_id)
    return db.query(query.exists()).scalar()


def invalidate_catalog_cache() -> None:
    cleared = catalog_cache.clear()
    logger.info(f"カタログキャッシュをクリア: {cleared}件")
