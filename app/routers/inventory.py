"""
Inventory（コレクション）API エンドポイント
ウィッシュリスト・予約・所持の管理
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.database import get_db
from app.models.base import InventoryStatus
from app.models.figure import Figure
from app.models.user import User
from app.models.user_figure import UserFigure
from app.schemas.base import MessageResponse
from app.schemas.inventory import (
    InventoryCreate,
    InventoryItemResponse,
    InventoryListResponse,
    InventoryUpdate,
)
from app.utils import INVENTORY_STATUSES, is_valid_inventory_status

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/inventory", tags=["Inventory"])


def _get_own_entry(db: Session, entry_id: str, user: User) -> UserFigure:
    entry = db.query(UserFigure).filter(UserFigure.id == entry_id).first()
    if not entry:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="コレクションに登録されていません"
        )
    if entry.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="このエントリーを操作する権限がありません"
        )
    return entry


@router.get("", response_model=InventoryListResponse)
def get_inventory(
    status_filter: Optional[str] = Query(None, alias="status", description="WISHLIST / PREORDER / OWNED"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    コレクション一覧を取得（新しい順、ステータス別件数付き）
    """
    query = db.query(UserFigure).filter(UserFigure.user_id == current_user.id)
    # 不明なステータスは無視して全件
    if is_valid_inventory_status(status_filter):
        query = query.filter(UserFigure.status == status_filter)

    items = query.order_by(UserFigure.created_at.desc(), UserFigure.id.asc()).all()

    rows = (
        db.query(UserFigure.status, func.count(UserFigure.id))
        .filter(UserFigure.user_id == current_user.id)
        .group_by(UserFigure.status)
        .all()
    )
    totals = {s: 0 for s in INVENTORY_STATUSES}
    totals.update(dict(rows))

    return InventoryListResponse(
        items=[InventoryItemResponse.model_validate(item) for item in items],
        totals=totals,
    )


@router.post("", response_model=InventoryItemResponse, status_code=status.HTTP_201_CREATED)
def add_to_inventory(
    request: InventoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    コレクションにフィギュアを追加
    """
    if not request.figure_id or not request.status:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="figure_id と status は必須です",
        )
    if not is_valid_inventory_status(request.status):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="ステータスが不正です"
        )

    # フィギュアの存在確認
    figure = db.query(Figure).filter(Figure.id == request.figure_id).first()
    if not figure:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="フィギュアが見つかりません"
        )

    # 重複チェック
    existing = (
        db.query(UserFigure)
        .filter(
            UserFigure.user_id == current_user.id,
            UserFigure.figure_id == request.figure_id,
        )
        .first()
    )
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="このフィギュアは既にコレクションに追加されています",
        )

    preorder_month = None
    if request.status == InventoryStatus.PREORDER.value:
        # 予約月の指定がなければ発売月を使う
        preorder_month = request.preorder_month or figure.release_month_key

    entry = UserFigure(
        user_id=current_user.id,
        figure_id=figure.id,
        status=request.status,
        user_price=request.user_price,
        preorder_month=preorder_month,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)

    logger.info(f"コレクション追加: user={current_user.id}, figure={figure.id}, status={entry.status}")
    return InventoryItemResponse.model_validate(entry)


@router.put("/{entry_id}", response_model=InventoryItemResponse)
def update_inventory(
    entry_id: str,
    request: InventoryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    コレクションのステータス・購入価格・予約月を更新
    """
    entry = _get_own_entry(db, entry_id, current_user)
    data = request.model_dump(exclude_unset=True)

    if "status" in data:
        if not is_valid_inventory_status(data["status"]):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="ステータスが不正です"
            )
        entry.status = data["status"]
        if entry.status == InventoryStatus.PREORDER.value and not entry.preorder_month:
            entry.preorder_month = entry.figure.release_month_key
        elif entry.status != InventoryStatus.PREORDER.value:
            entry.preorder_month = None

    if "user_price" in data:
        entry.user_price = data["user_price"]
    if "preorder_month" in data and entry.status == InventoryStatus.PREORDER.value:
        entry.preorder_month = data["preorder_month"]

    db.commit()
    db.refresh(entry)
    return InventoryItemResponse.model_validate(entry)


@router.delete("/{entry_id}", response_model=MessageResponse)
def remove_from_inventory(
    entry_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    コレクションから削除
    """
    entry = _get_own_entry(db, entry_id, current_user)
    db.delete(entry)
    db.commit()

    return MessageResponse(success=True, message="コレクションから削除しました")
