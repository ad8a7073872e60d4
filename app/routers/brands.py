"""
Brand API エンドポイント
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
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
from app.schemas.figure import BrandDetail, FigureSummary
from app.schemas.taxonomy import BrandCreate, BrandResponse, BrandUpdate, LineRef
from app.services.catalog_service import (
    count_figures_by,
    invalidate_catalog_cache,
    slug_taken,
    visible_figure_statuses,
    visible_statuses,
)
from app.utils import slugify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/brands", tags=["Brands"])


def _line_counts(db: Session, statuses: List[str]) -> dict:
    rows = (
        db.query(Line.brand_id, func.count(Line.id))
        .filter(Line.status.in_(statuses))
        .group_by(Line.brand_id)
        .all()
    )
    return dict(rows)


def _get_visible_brand(db: Session, brand_id: str, user) -> Brand:
    brand = db.query(Brand).filter(Brand.id == brand_id).first()
    # 承認待ちは管理者と投稿者のみ閲覧可能
    if not brand or (
        brand.status != ContentStatus.APPROVED.value
        and not (user and (is_admin(user.role) or brand.created_by_id == user.id))
    ):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="ブランドが見つかりません"
        )
    return brand


@router.get("", response_model=List[BrandResponse])
def list_brands(
    include_pending: bool = Query(False, description="承認待ちも含める（管理者のみ）"),
    db: Session = Depends(get_db),
    current_user=Depends(get_optional_user),
):
    """
    ブランド一覧を取得（名前順、フィギュア数・ライン数付き）
    """
    statuses = visible_statuses(include_pending, current_user)
    figure_statuses = visible_figure_statuses(db, current_user, include_pending)

    brands = db.query(Brand).filter(Brand.status.in_(statuses)).order_by(Brand.name).all()
    figure_counts = count_figures_by(db, Figure.brand_id, figure_statuses)
    line_counts = _line_counts(db, statuses)

    return [
        BrandResponse.model_validate(brand).model_copy(
            update={
                "figure_count": figure_counts.get(brand.id, 0),
                "line_count": line_counts.get(brand.id, 0),
            }
        )
        for brand in brands
    ]


@router.get("/{brand_id}", response_model=BrandDetail)
def get_brand(
    brand_id: str,
    db: Session = Depends(get_db),
    current_user=Depends(get_optional_user),
):
    """
    ブランド詳細（ライン・フィギュア付き）
    """
    brand = _get_visible_brand(db, brand_id, current_user)
    figure_statuses = visible_figure_statuses(db, current_user)

    lines = [line for line in brand.lines if line.status == ContentStatus.APPROVED.value]
    figures = (
        db.query(Figure)
        .filter(Figure.brand_id == brand.id, Figure.status.in_(figure_statuses))
        .order_by(Figure.created_at.desc())
        .all()
    )

    return BrandDetail.model_validate(brand).model_copy(
        update={
            "lines": [LineRef.model_validate(line) for line in lines],
            "figures": [FigureSummary.model_validate(f) for f in figures],
            "figure_count": len(figures),
            "line_count": len(lines),
        }
    )


@router.post("", response_model=BrandResponse, status_code=status.HTTP_201_CREATED)
def create_brand(
    request: BrandCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    ブランドを作成（管理者以外の投稿は承認待ち）
    """
    slug = slugify(request.name)
    if not slug:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="名前が不正です"
        )
    if slug_taken(db, Brand, slug):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="同じ名前のブランドが既に存在します",
        )

    brand = Brand(
        name=request.name,
        slug=slug,
        description=request.description,
        country=request.country,
        logo_url=request.logo_url,
        status=ContentStatus.APPROVED.value if is_admin(current_user.role) else ContentStatus.PENDING.value,
        created_by_id=current_user.id,
    )
    db.add(brand)
    db.commit()
    db.refresh(brand)
    invalidate_catalog_cache()

    logger.info(f"ブランド作成: {brand.name} ({brand.status}) by {current_user.id}")
    return BrandResponse.model_validate(brand)


@router.put("/{brand_id}", response_model=BrandResponse)
def update_brand(
    brand_id: str,
    request: BrandUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    ブランドを更新（管理者のみ）
    """
    brand = db.query(Brand).filter(Brand.id == brand_id).first()
    if not brand:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="ブランドが見つかりません"
        )

    data = request.model_dump(exclude_unset=True)
    if data.get("name") and data["name"] != brand.name:
        slug = slugify(data["name"])
        if not slug or slug_taken(db, Brand, slug, exclude_id=brand.id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="同じ名前のブランドが既に存在します",
            )
        brand.slug = slug

    for field, value in data.items():
        if field == "name" and not value:
            continue
        setattr(brand, field, value)

    db.commit()
    db.refresh(brand)
    invalidate_catalog_cache()
    return BrandResponse.model_validate(brand)


@router.delete("/{brand_id}", response_model=MessageResponse)
def delete_brand(
    brand_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    ブランドを削除（所属ライン・フィギュアも削除、管理者のみ）
    """
    brand = db.query(Brand).filter(Brand.id == brand_id).first()
    if not brand:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="ブランドが見つかりません"
        )

    db.delete(brand)
    db.commit()
    invalidate_catalog_cache()

    logger.info(f"ブランド削除: {brand_id} by {current_user.id}")
    return MessageResponse(success=True, message="ブランドを削除しました")
