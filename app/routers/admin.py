"""
Admin API エンドポイント
承認フロー・ユーザー管理・システム設定・ホームセクション管理
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_admin, require_superadmin
from app.models.base import ContentStatus, UserRole
from app.models.brand import Brand
from app.models.character import Character
from app.models.figure import Figure
from app.models.figure_list import FigureList
from app.models.home_section import HomeSection
from app.models.line import Line
from app.models.review import Review
from app.models.series import Series
from app.models.tag import Tag
from app.models.user import User
from app.models.user_figure import UserFigure
from app.schemas.admin import (
    AdminUserResponse,
    ApproveRequest,
    PendingItem,
    PendingResponse,
    RoleUpdateRequest,
    SystemConfigRequest,
    SystemConfigResponse,
)
from app.schemas.base import MessageResponse
from app.schemas.home_section import (
    HomeSectionCreate,
    HomeSectionReorderRequest,
    HomeSectionResponse,
    HomeSectionUpdate,
)
from app.schemas.user import UserPublic
from app.services.cache_service import catalog_cache
from app.services.catalog_service import invalidate_catalog_cache
from app.services.notification_service import NotificationService
from app.services.release_batch import ReleaseBatchProcessor
from app.services.scheduler_service import batch_lock, get_scheduler_status
from app.services.system_config_service import (
    KNOWN_CONFIG_KEYS,
    get_all_configs,
    get_config,
    set_config,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])

PENDING = ContentStatus.PENDING.value

# 承認対象の種別 → モデル
CONTENT_MODELS = {
    "figure": Figure,
    "brand": Brand,
    "line": Line,
    "series": Series,
    "character": Character,
}

# 種別 → PendingResponse のフィールド名
PENDING_GROUPS = {
    "figures": "figure",
    "brands": "brand",
    "lines": "line",
    "series": "series",
    "characters": "character",
}

PENDING_TYPES = ["counts", "all"] + list(PENDING_GROUPS)

VALID_ROLES = [r.value for r in UserRole]


def content_link(content_type: str, content_id: str) -> str:
    """承認通知のリンク先"""
    if content_type == "figure":
        return f"/catalog/{content_id}"
    return f"/catalog?{content_type}_id={content_id}"


def _pending_extra(content_type: str, item) -> Dict[str, Any]:
    if content_type == "figure":
        return {
            "brand": item.brand.name if item.brand else None,
            "line": item.line.name if item.line else None,
            "release_date": item.release_date,
        }
    if content_type == "line":
        return {"brand": item.brand.name if item.brand else None}
    if content_type == "character":
        return {"series": item.series.name if item.series else None}
    return {}


def _pending_items(db: Session, content_type: str) -> List[PendingItem]:
    model = CONTENT_MODELS[content_type]
    rows = (
        db.query(model)
        .filter(model.status == PENDING)
        .order_by(model.created_at.asc())
        .all()
    )
    return [
        PendingItem(
            id=row.id,
            type=content_type,
            name=row.name,
            created_by=UserPublic.model_validate(row.created_by) if row.created_by else None,
            created_at=row.created_at,
            extra=_pending_extra(content_type, row),
        )
        for row in rows
    ]


def _get_content_or_error(db: Session, content_type: Optional[str], content_id: Optional[str]):
    """種別とIDを検証して対象を返す（不正 400 / 不在 404）"""
    if not content_type or content_type not in CONTENT_MODELS or not content_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="type と id を正しく指定してください",
        )
    model = CONTENT_MODELS[content_type]
    item = db.query(model).filter(model.id == content_id).first()
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="対象のコンテンツが見つかりません"
        )
    return item


# ========================================
# 承認フロー
# ========================================

@router.get("/pending", response_model=PendingResponse)
def get_pending(
    type: str = Query("all", description="counts / all / figures / brands / lines / series / characters"),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """
    承認待ちコンテンツを取得（件数は常に含む）
    """
    if type not in PENDING_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="type が不正です"
        )

    counts = {
        group: db.query(CONTENT_MODELS[content_type]).filter(
            CONTENT_MODELS[content_type].status == PENDING
        ).count()
        for group, content_type in PENDING_GROUPS.items()
    }
    counts["total"] = sum(counts.values())

    response = PendingResponse(counts=counts)
    if type == "counts":
        return response

    for group, content_type in PENDING_GROUPS.items():
        if type in ("all", group):
            setattr(response, group, _pending_items(db, content_type))
    return response


@router.post("/approve", response_model=MessageResponse)
def approve_content(
    request: ApproveRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """
    コンテンツを承認 / 却下

    - approved=true: APPROVED にして投稿者へ通知
    - approved=false: PENDING に戻す
    """
    if not isinstance(request.approved, bool):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="type・id・approved を正しく指定してください",
        )
    item = _get_content_or_error(db, request.type, request.id)

    if not request.approved:
        item.status = ContentStatus.PENDING.value
        if request.type == "figure":
            item.approved_by_id = None
            item.approved_at = None
        db.commit()
        invalidate_catalog_cache()
        logger.info(f"却下: {request.type}={request.id} by {admin.id}")
        return MessageResponse(success=True, message="コンテンツを却下しました")

    item.status = ContentStatus.APPROVED.value
    if request.type == "figure":
        item.approved_by_id = admin.id
        item.approved_at = datetime.now()

    if item.created_by_id and item.created_by_id != admin.id:
        NotificationService(db).notify_content_approved(
            user_id=item.created_by_id,
            content_type=request.type,
            name=item.name,
            link=content_link(request.type, item.id),
            figure_id=item.id if request.type == "figure" else None,
        )

    db.commit()
    invalidate_catalog_cache()

    logger.info(f"承認: {request.type}={request.id} by {admin.id}")
    return MessageResponse(success=True, message="コンテンツを承認しました")


@router.delete("/approve", response_model=MessageResponse)
def delete_pending_content(
    type: Optional[str] = Query(None),
    id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """承認待ちコンテンツを削除"""
    item = _get_content_or_error(db, type, id)
    db.delete(item)
    db.commit()
    invalidate_catalog_cache()

    logger.info(f"承認待ち削除: {type}={id} by {admin.id}")
    return MessageResponse(success=True, message="コンテンツを削除しました")


# ========================================
# ダッシュボード
# ========================================

@router.get("/stats")
def get_stats(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """管理ダッシュボード用の件数"""
    approved = ContentStatus.APPROVED.value
    return {
        "users": db.query(User).count(),
        "figures": db.query(Figure).filter(Figure.status == approved).count(),
        "pending_figures": db.query(Figure).filter(Figure.status == PENDING).count(),
        "brands": db.query(Brand).filter(Brand.status == approved).count(),
        "lines": db.query(Line).filter(Line.status == approved).count(),
        "series": db.query(Series).filter(Series.status == approved).count(),
        "characters": db.query(Character).filter(Character.status == approved).count(),
        "tags": db.query(Tag).count(),
        "lists": db.query(FigureList).count(),
        "reviews": db.query(Review).count(),
        "collection_entries": db.query(UserFigure).count(),
    }


# ========================================
# ユーザー管理（スーパー管理者）
# ========================================

def _count_by_user(db: Session, column) -> Dict[str, int]:
    return dict(db.query(column, func.count()).group_by(column).all())


@router.get("/users", response_model=List[AdminUserResponse])
def get_users(
    db: Session = Depends(get_db),
    admin: User = Depends(require_superadmin),
):
    """ユーザー一覧（コレクション・リスト・レビュー件数付き）"""
    users = db.query(User).order_by(User.created_at.desc(), User.id.asc()).all()
    collections = _count_by_user(db, UserFigure.user_id)
    lists = _count_by_user(db, FigureList.created_by_id)
    reviews = _count_by_user(db, Review.user_id)

    return [
        AdminUserResponse.model_validate(u).model_copy(update={
            "collection_count": collections.get(u.id, 0),
            "list_count": lists.get(u.id, 0),
            "review_count": reviews.get(u.id, 0),
        })
        for u in users
    ]


@router.put("/users/{user_id}", response_model=AdminUserResponse)
def update_user_role(
    user_id: str,
    request: RoleUpdateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_superadmin),
):
    """ユーザーのロールを変更（自分自身は不可）"""
    if request.role not in VALID_ROLES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="ロールが不正です"
        )
    if user_id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="自分のロールは変更できません"
        )

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="ユーザーが見つかりません"
        )

    user.role = request.role
    db.commit()
    db.refresh(user)

    logger.info(f"ロール変更: {user_id} -> {request.role} by {admin.id}")
    return AdminUserResponse.model_validate(user)


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    admin: User = Depends(require_superadmin),
):
    if user_id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="自分自身は削除できません"
        )

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="ユーザーが見つかりません"
        )

    db.delete(user)
    db.commit()

    logger.info(f"ユーザー削除: {user_id} by {admin.id}")
    return MessageResponse(success=True, message="ユーザーを削除しました")


# ========================================
# システム設定
# ========================================

@router.get("/system-config")
def get_system_config(
    key: Optional[str] = Query(None, description="設定キー（省略時は全件）"),
    db: Session = Depends(get_db),
):
    """システム設定を取得（公開）"""
    if key is None:
        return get_all_configs(db)
    if key not in KNOWN_CONFIG_KEYS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="未知の設定キーです"
        )
    return SystemConfigResponse(key=key, value=get_config(db, key))


@router.post("/system-config", response_model=SystemConfigResponse)
def update_system_config(
    request: SystemConfigRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_superadmin),
):
    try:
        row = set_config(db, request.key, request.value)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="未知の設定キーです"
        )

    # 承認待ちの表示切替はカタログ集計に影響する
    invalidate_catalog_cache()
    return SystemConfigResponse(key=row.key, value=json.loads(row.value))


# ========================================
# ホームセクション（スーパー管理者）
# ========================================

def _get_section_or_404(db: Session, section_id: str) -> HomeSection:
    section = db.query(HomeSection).filter(HomeSection.id == section_id).first()
    if not section:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="セクションが見つかりません"
        )
    return section


@router.get("/home-sections", response_model=List[HomeSectionResponse])
def get_home_sections(
    db: Session = Depends(get_db),
    admin: User = Depends(require_superadmin),
):
    sections = db.query(HomeSection).order_by(HomeSection.order.asc()).all()
    return [HomeSectionResponse.model_validate(s) for s in sections]


@router.post("/home-sections", response_model=HomeSectionResponse, status_code=status.HTTP_201_CREATED)
def create_home_section(
    request: HomeSectionCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_superadmin),
):
    """セクションを末尾に追加（order = 現在の件数）"""
    section = HomeSection(
        title=request.title,
        type=request.type.value,
        config=request.config.to_json(),
        view_all_url=request.view_all_url,
        is_visible=request.is_visible,
        order=db.query(HomeSection).count(),
    )
    db.add(section)
    db.commit()
    db.refresh(section)

    logger.info(f"ホームセクション作成: {section.title} ({section.type})")
    return HomeSectionResponse.model_validate(section)


@router.post("/home-sections/reorder", response_model=MessageResponse)
def reorder_home_sections(
    request: HomeSectionReorderRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_superadmin),
):
    """
    並び順を一括更新

    items: [{"id": ..., "order": ...}]
    """
    if not isinstance(request.items, list):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="items は配列で指定してください"
        )

    orders = {}
    for entry in request.items:
        if not isinstance(entry, dict) or "id" not in entry or not isinstance(entry.get("order"), int):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="items の形式が不正です"
            )
        orders[entry["id"]] = entry["order"]

    sections = db.query(HomeSection).filter(HomeSection.id.in_(list(orders))).all()
    for section in sections:
        section.order = orders[section.id]
    db.commit()

    return MessageResponse(success=True, message=f"{len(sections)}件のセクションを並び替えました")


@router.put("/home-sections/{section_id}", response_model=HomeSectionResponse)
def update_home_section(
    section_id: str,
    request: HomeSectionUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_superadmin),
):
    section = _get_section_or_404(db, section_id)
    data = request.model_dump(exclude_unset=True)

    if data.get("title") is not None:
        section.title = data["title"]
    if data.get("type") is not None:
        section.type = data["type"].value
    if request.config is not None:
        section.config = request.config.to_json()
    if "view_all_url" in data:
        section.view_all_url = data["view_all_url"]
    if data.get("is_visible") is not None:
        section.is_visible = data["is_visible"]
    if data.get("order") is not None:
        section.order = data["order"]

    db.commit()
    db.refresh(section)
    return HomeSectionResponse.model_validate(section)


@router.delete("/home-sections/{section_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_home_section(
    section_id: str,
    db: Session = Depends(get_db),
    admin: User = Depends(require_superadmin),
):
    section = _get_section_or_404(db, section_id)
    db.delete(section)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ========================================
# キャッシュ・バッチ（管理用）
# ========================================

@router.get("/cache/stats")
def get_cache_stats(admin: User = Depends(require_admin)):
    """キャッシュ統計情報を取得（管理・モニタリング用）"""
    return {
        "status": "ok",
        "cache": catalog_cache.get_stats(),
    }


@router.get("/scheduler/status")
def scheduler_status(admin: User = Depends(require_admin)):
    return get_scheduler_status()


@router.post("/batch/release-update")
def trigger_release_update(
    db: Session = Depends(get_db),
    admin: User = Depends(require_superadmin),
):
    """発売状況更新バッチを手動実行（実行中なら 409）"""
    if not batch_lock.acquire(blocking=False):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="バッチは実行中です"
        )
    try:
        result = ReleaseBatchProcessor(db).run()
    finally:
        batch_lock.release()

    logger.info(f"発売状況更新バッチ手動実行: by {admin.id}")
    return result
