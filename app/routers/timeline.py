"""
Timeline API エンドポイント
製品ライン・作品・ブランド単位の発売年表
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.figure import Figure
from app.schemas.calendar import TimelineResponse
from app.schemas.figure import FigureSummary
from app.services.catalog_service import APPROVED_ONLY, figure_query, release_order

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/timeline", tags=["Timeline"])


@router.get("", response_model=TimelineResponse)
def get_timeline(
    line_id: Optional[str] = Query(None),
    series_id: Optional[str] = Query(None),
    brand_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    発売年が決まっているフィギュアを発売日順に返す

    絞り込みが一つもなければ空
    """
    if not (line_id or series_id or brand_id):
        return TimelineResponse(figures=[], total=0)

    figures = (
        figure_query(
            db,
            statuses=APPROVED_ONLY,
            brand_id=brand_id,
            line_ids=[line_id] if line_id else None,
            series_ids=[series_id] if series_id else None,
        )
        .filter(Figure.release_year.isnot(None))
        .order_by(*release_order(), Figure.name.asc())
        .all()
    )

    return TimelineResponse(
        figures=[FigureSummary.model_validate(f) for f in figures],
        total=len(figures),
    )
