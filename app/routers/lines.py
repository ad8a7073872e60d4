"""
Line API エンドポイント
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.database import get_db
from app.dependencies import get_optional_user, is_admin, require_admin
from app.models.base import ContentStatus
from app.models.brand import Brand
from app.models.figure import Figure
from app.models.line import Line
from app.models.user import User
from app.schemas.base import MessageResponse
from app.schemas.figure import FigureSummary, LineDetail
from app.schemas.taxonomy import LineCreate, LineResponse, LineUpdate
from app.services.catalog_service import (
    count_figures_by,
    invalidate_catalog_cache,
    slug_taken,
    visible_figure_statuses,
    visible_statuses,
)
from app.utils import slugify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/lines", tags=["Lines"])


@router.get("", response_model=List[LineResponse])
def list_lines(
    brand_id: Optional[str] = Query(None, description="ブランドIDで絞り込み"),
    include_pending: bool = Query(False, description="承認待ちも含める（管理者のみ）"),
    db: Session = Depends(get_db),
    current_user=Depends(get_optional_user),
):
    """
    製品ライン一覧を取得（名前順、フィギュア数付き）
    """
    statuses = visible_statuses(include_pending, current_user)
    figure_counts = count_figures_by(
        db, Figure.line_id, visible_figure_statuses(db, current_user, include_pending)
    )

    query = db.query(Line).filter(Line.status.in_(statuses))
    if brand_id:
        query = query.filter(Line.brand_id == brand_id)

    return [
        LineResponse.model_validate(line).model_copy(
            update={"figure_count": figure_counts.get(line.id, 0)}
        )
        for line in query.order_by(Line.name).all()
    ]


@router.get("/{line_id}", response_model=LineDetail)
def get_line(
    line_id: str,
    db: Session = Depends(get_db),
    current_user=Depends(get_optional_user),
):
    """
    製品ライン詳細（ブランド・フィギュア付き）
    """
    line = db.query(Line).filter(Line.id == line_id).first()
    if not line or (
        line.status != ContentStatus.APPROVED.value
        and not (current_user and (is_admin(current_user.role) or line.created_by_id == current_user.id))
    ):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="製品ラインが見つかりません"
        )

    figures = (
        db.query(Figure)
        .filter(Figure.line_id == line.id, Figure.status.in_(visible_figure_statuses(db, current_user)))
        .order_by(Figure.created_at.desc())
        .all()
    )

    return LineDetail.model_validate(line).model_copy(
        update={
            "figures": [FigureSummary.model_validate(f) for f in figures],
            "figure_count": len(figures),
        }
    )


@router.post("", response_model=LineResponse, status_code=status.HTTP_201_CREATED)
def create_line(
    request: LineCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    製品ラインを作成（管理者以外の投稿は承認待ち）
    """
    brand = db.query(Brand).filter(Brand.id == request.brand_id).first()
    if not brand:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="ブランドが見つかりません"
        )

    slug = slugify(request.name)
    if not slug or slug_taken(db, Line, slug):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="同じ名前の製品ラインが既に存在します",
        )

    line = Line(
        name=request.name,
        slug=slug,
        brand_id=brand.id,
        description=request.description,
        image_url=request.image_url,
        release_year=request.release_year,
        status=ContentStatus.APPROVED.value if is_admin(current_user.role) else ContentStatus.PENDING.value,
        created_by_id=current_user.id,
    )
    db.add(line)
    db.commit()
    db.refresh(line)
    invalidate_catalog_cache()

    logger.info(f"製品ライン作成: {line.name} ({line.status}) by {current_user.id}")
    return LineResponse.model_validate(line)


@router.put("/{line_id}", response_model=LineResponse)
def update_line(
    line_id: str,
    request: LineUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    製品ラインを更新（管理者のみ）
    """
    line = db.query(Line).filter(Line.id == line_id).first()
    if not line:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="製品ラインが見つかりません"
        )

    data = request.model_dump(exclude_unset=True)
    if data.get("brand_id") and not db.query(Brand).filter(Brand.id == data["brand_id"]).first():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="ブランドが見つかりません"
        )
    if data.get("name") and data["name"] != line.name:
        slug = slugify(data["name"])
        if not slug or slug_taken(db, Line, slug, exclude_id=line.id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="同じ名前の製品ラインが既に存在します",
            )
        line.slug = slug

    for field, value in data.items():
        if field in ("name", "brand_id") and not value:
            continue
        setattr(line, field, value)

    db.commit()
    db.refresh(line)
    invalidate_catalog_cache()
    return LineResponse.model_validate(line)


@router.delete("/{line_id}", response_model=MessageResponse)
def delete_line(
    line_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    製品ラインを削除（所属フィギュアも削除、管理者のみ）
    """
    line = db.query(Line).filter(Line.id == line_id).first()
    if not line:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="製品ラインが見つかりません"
        )

    db.delete(line)
    db.commit()
    invalidate_catalog_cache()

    logger.info(f"製品ライン削除: {line_id} by {current_user.id}")
    return MessageResponse(success=True, message="製品ラインを削除しました")
