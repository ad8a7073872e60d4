"""
Calendar API エンドポイント
予約中フィギュアの月別まとめと、月ごとの発売予定一覧
"""

import logging
from collections import defaultdict
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.database import get_db
from app.models.base import InventoryStatus
from app.models.figure import Figure
from app.models.user import User
from app.models.user_figure import UserFigure
from app.schemas.calendar import (
    CalendarEntry,
    CalendarMonth,
    CalendarResponse,
    ReleasesResponse,
)
from app.schemas.figure import FigureSummary
from app.services.catalog_service import APPROVED_ONLY, figure_query
from app.utils import get_month_name

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/calendar", tags=["Calendar"])

TBA = "TBA"


def entry_month(entry: UserFigure) -> str:
    """予約月 → 発売月 → TBA の順で所属月を決める"""
    return entry.preorder_month or entry.figure.release_month_key or TBA


def entry_price(entry: UserFigure) -> float:
    """購入価格がなければ MXN 価格"""
    if entry.user_price is not None:
        return entry.user_price
    return entry.figure.price_mxn or 0


@router.get("", response_model=CalendarResponse)
def get_calendar(
    month: Optional[str] = Query(None, pattern=r"^\d{4}-(0[1-9]|1[0-2])$", description="YYYY-MM"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    予約中フィギュアを月ごとにまとめて返す

    - 月は昇順、TBA は末尾
    - month 指定時はその月のみ
    """
    entries = (
        db.query(UserFigure)
        .filter(
            UserFigure.user_id == current_user.id,
            UserFigure.status == InventoryStatus.PREORDER.value,
        )
        .order_by(UserFigure.created_at.asc(), UserFigure.id.asc())
        .all()
    )

    grouped = defaultdict(list)
    for entry in entries:
        key = entry_month(entry)
        if month and key != month:
            continue
        grouped[key].append(entry)

    months = []
    total_value = 0.0
    total_count = 0
    for key in sorted(grouped, key=lambda k: (k == TBA, k)):
        items = [
            CalendarEntry.model_validate(entry).model_copy(update={"price": entry_price(entry)})
            for entry in grouped[key]
        ]
        month_total = sum(item.price for item in items)
        months.append(CalendarMonth(
            month=key,
            label=TBA if key == TBA else get_month_name(key),
            items=items,
            total=month_total,
        ))
        total_value += month_total
        total_count += len(items)

    return CalendarResponse(months=months, total_value=total_value, total_count=total_count)


@router.get("/releases", response_model=ReleasesResponse)
def get_releases(
    year: Optional[int] = Query(None, description="年"),
    month: Optional[int] = Query(None, description="月（1〜12）"),
    brand_id: Optional[str] = Query(None),
    line_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    指定月に発売予定の承認済みフィギュア（日付順、日未定は末尾）
    """
    if year is None or month is None or not 1 <= month <= 12 or year < 1:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="year と month（1〜12）を正しく指定してください",
        )

    figures = (
        figure_query(
            db,
            statuses=APPROVED_ONLY,
            brand_id=brand_id,
            line_ids=[line_id] if line_id else None,
        )
        .filter(Figure.release_year == year, Figure.release_month == month)
        .order_by(Figure.release_day.is_(None), Figure.release_day.asc(), Figure.name.asc())
        .all()
    )

    return ReleasesResponse(
        year=year,
        month=month,
        label=get_month_name(f"{year}-{month:02d}"),
        figures=[FigureSummary.model_validate(f) for f in figures],
        total=len(figures),
    )
