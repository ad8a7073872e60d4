"""
Tag API エンドポイント
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_admin
from app.models.figure import figure_tags
from app.models.tag import Tag
from app.models.user import User
from app.schemas.base import MessageResponse
from app.schemas.taxonomy import TagCreate, TagResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tags", tags=["Tags"])


def _tag_response(db: Session, tag: Tag) -> TagResponse:
    count = db.query(func.count(figure_tags.c.figure_id)).filter(figure_tags.c.tag_id == tag.id).scalar()
    return TagResponse(id=tag.id, name=tag.name, figure_count=count or 0)


def _ensure_unique_name(db: Session, name: str, exclude_id: str = None) -> None:
    query = db.query(Tag).filter(func.lower(Tag.name) == name.lower())
    if exclude_id:
        query = query.filter(Tag.id != exclude_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="同じ名前のタグが既に存在します",
        )


@router.get("", response_model=List[TagResponse])
def list_tags(db: Session = Depends(get_db)):
    """
    タグ一覧を取得（名前順、フィギュア数付き）
    """
    rows = (
        db.query(Tag, func.count(figure_tags.c.figure_id))
        .outerjoin(figure_tags, figure_tags.c.tag_id == Tag.id)
        .group_by(Tag.id)
        .order_by(Tag.name)
        .all()
    )
    return [TagResponse(id=tag.id, name=tag.name, figure_count=count) for tag, count in rows]


@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
def create_tag(
    request: TagCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    タグを作成（管理者のみ）
    """
    name = request.name.strip()
    _ensure_unique_name(db, name)

    tag = Tag(name=name)
    db.add(tag)
    db.commit()
    db.refresh(tag)

    logger.info(f"タグ作成: {tag.name} by {current_user.id}")
    return TagResponse(id=tag.id, name=tag.name, figure_count=0)


@router.put("/{tag_id}", response_model=TagResponse)
def update_tag(
    tag_id: str,
    request: TagCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    タグ名を変更（管理者のみ）
    """
    tag = db.query(Tag).filter(Tag.id == tag_id).first()
    if not tag:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="タグが見つかりません"
        )

    name = request.name.strip()
    _ensure_unique_name(db, name, exclude_id=tag.id)
    tag.name = name
    db.commit()
    db.refresh(tag)
    return _tag_response(db, tag)


@router.delete("/{tag_id}", response_model=MessageResponse)
def delete_tag(
    tag_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    タグを削除（フィギュアとの関連も解除、管理者のみ）
    """
    tag = db.query(Tag).filter(Tag.id == tag_id).first()
    if not tag:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="タグが見つかりません"
        )

    db.delete(tag)
    db.commit()

    logger.info(f"タグ削除: {tag_id} by {current_user.id}")
    return MessageResponse(success=True, message="タグを削除しました")
