"""
Search API エンドポイント
名前の部分一致で承認済みコンテンツを検索（検索はDBに委譲）
"""

import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.base import ContentStatus
from app.models.brand import Brand
from app.models.figure import Figure
from app.models.line import Line
from app.models.series import Series
from app.schemas.figure import SearchResponse, SearchResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/search", tags=["Search"])

APPROVED = ContentStatus.APPROVED.value


@router.get("", response_model=SearchResponse)
def search(
    q: str = Query("", description="検索キーワード"),
    limit: int = Query(10, ge=1, le=50, description="種別ごとの最大件数"),
    db: Session = Depends(get_db),
):
    """
    フィギュア・ブランド・製品ライン・作品を横断検索

    フィギュアを先頭に、ブランド・ライン・作品の順で返す
    """
    keyword = q.strip()
    if not keyword:
        return SearchResponse(results=[])

    results = []

    figures = (
        db.query(Figure)
        .filter(Figure.status == APPROVED, Figure.name.icontains(keyword, autoescape=True))
        .order_by(Figure.name)
        .limit(limit)
        .all()
    )
    for f in figures:
        results.append(SearchResult(
            id=f.id,
            name=f.name,
            type="figure",
            image=f.image,
            subtitle=f"{f.brand.name} • {f.line.name if f.line else ''}",
            path=f"/catalog/{f.id}",
        ))

    brands = (
        db.query(Brand)
        .filter(Brand.status == APPROVED, Brand.name.icontains(keyword, autoescape=True))
        .order_by(Brand.name)
        .limit(limit)
        .all()
    )
    for b in brands:
        results.append(SearchResult(
            id=b.id, name=b.name, type="brand", image=b.logo_url,
            subtitle=b.country, path=f"/catalog?brand_id={b.id}",
        ))

    lines = (
        db.query(Line)
        .filter(Line.status == APPROVED, Line.name.icontains(keyword, autoescape=True))
        .order_by(Line.name)
        .limit(limit)
        .all()
    )
    for line in lines:
        results.append(SearchResult(
            id=line.id, name=line.name, type="line", image=line.image_url,
            subtitle=line.brand.name, path=f"/catalog?line_id={line.id}",
        ))

    series_list = (
        db.query(Series)
        .filter(Series.status == APPROVED, Series.name.icontains(keyword, autoescape=True))
        .order_by(Series.name)
        .limit(limit)
        .all()
    )
    for s in series_list:
        results.append(SearchResult(
            id=s.id, name=s.name, type="series", path=f"/catalog?series_id={s.id}",
        ))

    logger.info(f"検索: q={keyword}, {len(results)}件")
    return SearchResponse(results=results)
