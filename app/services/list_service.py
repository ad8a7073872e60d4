"""
リストサービス
リストの表示用変換と項目の並び順管理
"""
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.figure_list import FigureList, ListItem
from app.models.user import User
from app.models.base import UserRole
from app.schemas.figure import FigureSummary
from app.schemas.figure_list import ListSummary, ListDetail, ListItemResponse
from app.schemas.user import UserPublic

PREVIEW_SIZE = 5


def list_summary(figure_list: FigureList, preview_size: int = PREVIEW_SIZE) -> ListSummary:
    """先頭の項目をプレビューとして含む一覧表示用データ"""
    return ListSummary(
        id=figure_list.id,
        name=figure_list.name,
        description=figure_list.description,
        is_official=figure_list.is_official,
        is_featured=figure_list.is_featured,
        created_by=UserPublic.model_validate(figure_list.created_by),
        item_count=len(figure_list.items),
        preview=[FigureSummary.model_validate(item.figure) for item in figure_list.items[:preview_size]],
        created_at=figure_list.created_at,
    )


def list_detail(figure_list: FigureList) -> ListDetail:
    summary = list_summary(figure_list)
    return ListDetail(
        **summary.model_dump(),
        items=[ListItemResponse.model_validate(item) for item in figure_list.items],
    )


def next_item_order(db: Session, list_id: str) -> int:
    """末尾に追加する項目の並び順（最大値 + 1）"""
    current = db.query(func.max(ListItem.order)).filter(ListItem.list_id == list_id).scalar()
    return 0 if current is None else current + 1


def can_edit_list(figure_list: FigureList, user: Optional[User]) -> bool:
    """作成者または管理者のみ編集可能"""
    if user is None:
        return False
    if user.role in (UserRole.ADMIN.value, UserRole.SUPERADMIN.value):
        return True
    return figure_list.created_by_id == user.id


def featured_lists(db: Session, limit: int = 3) -> List[FigureList]:
    return (
        db.query(FigureList)
        .filter(FigureList.is_featured == True)  # noqa: E712
        .order_by(FigureList.updated_at.desc())
        .limit(limit)
        .all()
    )
