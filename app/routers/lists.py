"""
List API エンドポイント
ユーザー作成のフィギュアリスト（公式・おすすめリストを含む）
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.database import get_db
from app.dependencies import is_admin, is_superadmin
from app.models.figure import Figure
from app.models.figure_list import FigureList, ListItem
from app.models.user import User
from app.schemas.base import MessageResponse
from app.schemas.figure_list import (
    ListCreate,
    ListDetail,
    ListItemAdd,
    ListReorderRequest,
    ListSummary,
    ListUpdate,
)
from app.services.list_service import can_edit_list, list_detail, list_summary, next_item_order

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/lists", tags=["Lists"])


def _get_list_or_404(db: Session, list_id: str) -> FigureList:
    figure_list = db.query(FigureList).filter(FigureList.id == list_id).first()
    if not figure_list:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="リストが見つかりません"
        )
    return figure_list


def _get_editable_list(db: Session, list_id: str, user: User) -> FigureList:
    """作成者または管理者のみ操作可能"""
    figure_list = _get_list_or_404(db, list_id)
    if not can_edit_list(figure_list, user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="このリストを編集する権限がありません"
        )
    return figure_list


# ========================================
# リスト
# ========================================

@router.get("", response_model=List[ListSummary])
def get_lists(
    featured: Optional[bool] = Query(None, description="おすすめリストのみ"),
    official: Optional[bool] = Query(None, description="公式リストのみ"),
    user_id: Optional[str] = Query(None, description="作成者で絞り込み"),
    db: Session = Depends(get_db),
):
    """
    リスト一覧（新しい順、先頭5件のプレビュー付き）
    """
    query = db.query(FigureList)
    if featured is not None:
        query = query.filter(FigureList.is_featured == featured)
    if official is not None:
        query = query.filter(FigureList.is_official == official)
    if user_id:
        query = query.filter(FigureList.created_by_id == user_id)

    lists = query.order_by(FigureList.created_at.desc(), FigureList.id.asc()).all()
    return [list_summary(fl) for fl in lists]


@router.post("", response_model=ListDetail, status_code=status.HTTP_201_CREATED)
def create_list(
    request: ListCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    リストを作成（公式フラグは管理者のみ有効）
    """
    figure_list = FigureList(
        name=request.name,
        description=request.description,
        is_official=request.is_official and is_admin(current_user.role),
        created_by_id=current_user.id,
    )
    db.add(figure_list)
    db.commit()
    db.refresh(figure_list)

    logger.info(f"リスト作成: {figure_list.id} by {current_user.id}")
    return list_detail(figure_list)


@router.get("/{list_id}", response_model=ListDetail)
def get_list(list_id: str, db: Session = Depends(get_db)):
    """リスト詳細（項目は並び順）"""
    return list_detail(_get_list_or_404(db, list_id))


@router.put("/{list_id}", response_model=ListDetail)
def update_list(
    list_id: str,
    request: ListUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    リストを更新

    - is_official は管理者のみ
    - is_featured はスーパー管理者のみ
    """
    figure_list = _get_editable_list(db, list_id, current_user)
    data = request.model_dump(exclude_unset=True)

    if data.get("name") is not None:
        figure_list.name = data["name"]
    if "description" in data:
        figure_list.description = data["description"]
    if data.get("is_official") is not None and is_admin(current_user.role):
        figure_list.is_official = data["is_official"]
    if data.get("is_featured") is not None and is_superadmin(current_user.role):
        figure_list.is_featured = data["is_featured"]

    db.commit()
    db.refresh(figure_list)
    return list_detail(figure_list)


@router.delete("/{list_id}", response_model=MessageResponse)
def delete_list(
    list_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    figure_list = _get_editable_list(db, list_id, current_user)
    db.delete(figure_list)
    db.commit()

    logger.info(f"リスト削除: {list_id} by {current_user.id}")
    return MessageResponse(success=True, message="リストを削除しました")


# ========================================
# リスト項目
# ========================================

@router.post("/{list_id}/items", response_model=ListDetail, status_code=status.HTTP_201_CREATED)
def add_list_item(
    list_id: str,
    request: ListItemAdd,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    リスト末尾にフィギュアを追加
    """
    figure_list = _get_editable_list(db, list_id, current_user)

    figure = db.query(Figure).filter(Figure.id == request.figure_id).first()
    if not figure:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="フィギュアが見つかりません"
        )

    existing = (
        db.query(ListItem)
        .filter(ListItem.list_id == list_id, ListItem.figure_id == request.figure_id)
        .first()
    )
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="このフィギュアは既にリストに追加されています",
        )

    item = ListItem(
        list_id=list_id,
        figure_id=figure.id,
        order=next_item_order(db, list_id),
    )
    db.add(item)
    db.commit()
    db.refresh(figure_list)
    return list_detail(figure_list)


@router.delete("/{list_id}/items", response_model=MessageResponse)
def remove_list_item(
    list_id: str,
    figure_id: str = Query(..., description="削除するフィギュアID"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _get_editable_list(db, list_id, current_user)

    item = (
        db.query(ListItem)
        .filter(ListItem.list_id == list_id, ListItem.figure_id == figure_id)
        .first()
    )
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="リストにこのフィギュアはありません"
        )

    db.delete(item)
    db.commit()
    return MessageResponse(success=True, message="リストから削除しました")


@router.put("/{list_id}/items/reorder", response_model=ListDetail)
def reorder_list_items(
    list_id: str,
    request: ListReorderRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    figure_ids の順に並べ替える（指定外の項目はその後ろに元の順で続く）
    """
    figure_list = _get_editable_list(db, list_id, current_user)

    positions = {figure_id: index for index, figure_id in enumerate(request.figure_ids)}
    ordered = sorted(
        figure_list.items,
        key=lambda item: (item.figure_id not in positions, positions.get(item.figure_id, 0), item.order),
    )
    for index, item in enumerate(ordered):
        item.order = index

    db.commit()
    db.expire(figure_list, ["items"])
    return list_detail(figure_list)
