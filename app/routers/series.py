"""
Series（作品）API エンドポイント
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.database import get_db
from app.dependencies import get_optional_user, is_admin, require_admin
from app.models.base import ContentStatus
from app.models.series import Series
from app.models.user import User
from app.schemas.base import MessageResponse
from app.schemas.figure import FigureSummary, SeriesDetail
from app.schemas.taxonomy import CharacterRef, SeriesCreate, SeriesResponse, SeriesUpdate
from app.services.catalog_service import (
    count_figures_by_series,
    invalidate_catalog_cache,
    slug_taken,
    visible_figure_statuses,
    visible_statuses,
)
from app.utils import slugify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/series", tags=["Series"])


@router.get("", response_model=List[SeriesResponse])
def list_series(
    include_pending: bool = Query(False, description="承認待ちも含める（管理者のみ）"),
    db: Session = Depends(get_db),
    current_user=Depends(get_optional_user),
):
    """
    作品一覧を取得（名前順、フィギュア数付き）
    """
    statuses = visible_statuses(include_pending, current_user)
    figure_counts = count_figures_by_series(
        db, visible_figure_statuses(db, current_user, include_pending)
    )
    series_list = db.query(Series).filter(Series.status.in_(statuses)).order_by(Series.name).all()

    return [
        SeriesResponse.model_validate(s).model_copy(
            update={"figure_count": figure_counts.get(s.id, 0)}
        )
        for s in series_list
    ]


@router.get("/{series_id}", response_model=SeriesDetail)
def get_series(
    series_id: str,
    db: Session = Depends(get_db),
    current_user=Depends(get_optional_user),
):
    """
    作品詳細（キャラクター・フィギュア付き）
    """
    series = db.query(Series).filter(Series.id == series_id).first()
    if not series or (
        series.status != ContentStatus.APPROVED.value
        and not (current_user and (is_admin(current_user.role) or series.created_by_id == current_user.id))
    ):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="作品が見つかりません"
        )

    figure_statuses = visible_figure_statuses(db, current_user)
    figures = sorted(
        (f for f in series.figures if f.status in figure_statuses),
        key=lambda f: f.created_at,
        reverse=True,
    )
    characters = sorted(
        (c for c in series.characters if c.status == ContentStatus.APPROVED.value),
        key=lambda c: c.name,
    )

    return SeriesDetail.model_validate(series).model_copy(
        update={
            "characters": [CharacterRef.model_validate(c) for c in characters],
            "figures": [FigureSummary.model_validate(f) for f in figures],
            "figure_count": len(figures),
        }
    )


@router.post("", response_model=SeriesResponse, status_code=status.HTTP_201_CREATED)
def create_series(
    request: SeriesCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    作品を作成（管理者以外の投稿は承認待ち）
    """
    slug = slugify(request.name)
    if not slug or slug_taken(db, Series, slug):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="同じ名前の作品が既に存在します",
        )

    series = Series(
        name=request.name,
        slug=slug,
        description=request.description,
        status=ContentStatus.APPROVED.value if is_admin(current_user.role) else ContentStatus.PENDING.value,
        created_by_id=current_user.id,
    )
    db.add(series)
    db.commit()
    db.refresh(series)
    invalidate_catalog_cache()

    logger.info(f"作品作成: {series.name} ({series.status}) by {current_user.id}")
    return SeriesResponse.model_validate(series)


@router.put("/{series_id}", response_model=SeriesResponse)
def update_series(
    series_id: str,
    request: SeriesUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    作品を更新（管理者のみ）
    """
    series = db.query(Series).filter(Series.id == series_id).first()
    if not series:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="作品が見つかりません"
        )

    data = request.model_dump(exclude_unset=True)
    if data.get("name") and data["name"] != series.name:
        slug = slugify(data["name"])
        if not slug or slug_taken(db, Series, slug, exclude_id=series.id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="同じ名前の作品が既に存在します",
            )
        series.slug = slug

    for field, value in data.items():
        if field == "name" and not value:
            continue
        setattr(series, field, value)

    db.commit()
    db.refresh(series)
    invalidate_catalog_cache()
    return SeriesResponse.model_validate(series)


@router.delete("/{series_id}", response_model=MessageResponse)
def delete_series(
    series_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    作品を削除（フィギュアとの関連のみ解除、管理者のみ）
    """
    series = db.query(Series).filter(Series.id == series_id).first()
    if not series:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="作品が見つかりません"
        )

    db.delete(series)
    db.commit()
    invalidate_catalog_cache()

    logger.info(f"作品削除: {series_id} by {current_user.id}")
    return MessageResponse(success=True, message="作品を削除しました")
