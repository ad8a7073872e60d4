"""
Character API エンドポイント
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.database import get_db
from app.dependencies import get_optional_user, is_admin, require_admin
from app.models.base import ContentStatus
from app.models.character import Character
from app.models.figure import Figure
from app.models.series import Series
from app.models.user import User
from app.schemas.base import MessageResponse
from app.schemas.figure import CharacterDetail, FigureSummary
from app.schemas.taxonomy import CharacterCreate, CharacterResponse, CharacterUpdate
from app.services.catalog_service import (
    count_figures_by,
    slug_taken,
    visible_figure_statuses,
    visible_statuses,
)
from app.utils import slugify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/characters", tags=["Characters"])


def _ensure_series(db: Session, series_id: Optional[str]) -> None:
    if series_id and not db.query(Series).filter(Series.id == series_id).first():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="作品が見つかりません"
        )


@router.get("", response_model=List[CharacterResponse])
def list_characters(
    series_id: Optional[str] = Query(None, description="作品IDで絞り込み"),
    include_pending: bool = Query(False, description="承認待ちも含める（管理者のみ）"),
    db: Session = Depends(get_db),
    current_user=Depends(get_optional_user),
):
    """
    キャラクター一覧を取得（名前順、フィギュア数付き）
    """
    statuses = visible_statuses(include_pending, current_user)
    figure_counts = count_figures_by(
        db, Figure.character_id, visible_figure_statuses(db, current_user, include_pending)
    )

    query = db.query(Character).filter(Character.status.in_(statuses))
    if series_id:
        query = query.filter(Character.series_id == series_id)

    return [
        CharacterResponse.model_validate(c).model_copy(
            update={"figure_count": figure_counts.get(c.id, 0)}
        )
        for c in query.order_by(Character.name).all()
    ]


@router.get("/{character_id}", response_model=CharacterDetail)
def get_character(
    character_id: str,
    db: Session = Depends(get_db),
    current_user=Depends(get_optional_user),
):
    """
    キャラクター詳細（作品・フィギュア付き）
    """
    character = db.query(Character).filter(Character.id == character_id).first()
    if not character or (
        character.status != ContentStatus.APPROVED.value
        and not (current_user and (is_admin(current_user.role) or character.created_by_id == current_user.id))
    ):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="キャラクターが見つかりません"
        )

    figures = (
        db.query(Figure)
        .filter(
            Figure.character_id == character.id,
            Figure.status.in_(visible_figure_statuses(db, current_user)),
        )
        .order_by(Figure.created_at.desc())
        .all()
    )

    return CharacterDetail.model_validate(character).model_copy(
        update={
            "figures": [FigureSummary.model_validate(f) for f in figures],
            "figure_count": len(figures),
        }
    )


@router.post("", response_model=CharacterResponse, status_code=status.HTTP_201_CREATED)
def create_character(
    request: CharacterCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    キャラクターを作成（管理者以外の投稿は承認待ち）
    """
    _ensure_series(db, request.series_id)

    slug = slugify(request.name)
    if not slug or slug_taken(db, Character, slug):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="同じ名前のキャラクターが既に存在します",
        )

    character = Character(
        name=request.name,
        slug=slug,
        series_id=request.series_id,
        description=request.description,
        image_url=request.image_url,
        status=ContentStatus.APPROVED.value if is_admin(current_user.role) else ContentStatus.PENDING.value,
        created_by_id=current_user.id,
    )
    db.add(character)
    db.commit()
    db.refresh(character)

    logger.info(f"キャラクター作成: {character.name} ({character.status}) by {current_user.id}")
    return CharacterResponse.model_validate(character)


@router.put("/{character_id}", response_model=CharacterResponse)
def update_character(
    character_id: str,
    request: CharacterUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    キャラクターを更新（管理者のみ）
    """
    character = db.query(Character).filter(Character.id == character_id).first()
    if not character:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="キャラクターが見つかりません"
        )

    data = request.model_dump(exclude_unset=True)
    _ensure_series(db, data.get("series_id"))
    if data.get("name") and data["name"] != character.name:
        slug = slugify(data["name"])
        if not slug or slug_taken(db, Character, slug, exclude_id=character.id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="同じ名前のキャラクターが既に存在します",
            )
        character.slug = slug

    for field, value in data.items():
        if field == "name" and not value:
            continue
        setattr(character, field, value)

    db.commit()
    db.refresh(character)
    return CharacterResponse.model_validate(character)


@router.delete("/{character_id}", response_model=MessageResponse)
def delete_character(
    character_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    キャラクターを削除（フィギュアは残す、管理者のみ）
    """
    character = db.query(Character).filter(Character.id == character_id).first()
    if not character:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="キャラクターが見つかりません"
        )

    db.delete(character)
    db.commit()

    logger.info(f"キャラクター削除: {character_id} by {current_user.id}")
    return MessageResponse(success=True, message="キャラクターを削除しました")
