"""
Figure（カタログ）API エンドポイント
"""

import logging
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.database import get_db
from app.dependencies import get_optional_user, is_admin, require_admin
from app.models.base import ContentStatus, Currency, InventoryStatus
from app.models.brand import Brand
from app.models.character import Character
from app.models.figure import Figure, FigureImage, FigureVariant, VariantImage
from app.models.line import Line
from app.models.series import Series
from app.models.tag import Tag
from app.models.user import User
from app.schemas.base import MessageResponse
from app.schemas.figure import (
    DimensionsResponse,
    FacetsResponse,
    FigureCreate,
    FigureDetail,
    FigureListResponse,
    FigurePatch,
    FigureSummary,
    FigureUpdate,
    VariantCreate,
    VariantResponse,
)
from app.services.catalog_service import (
    SORT_OPTIONS,
    apply_sort,
    figure_query,
    get_facets,
    invalidate_catalog_cache,
    paginate,
    split_ids,
    visible_figure_statuses,
)
from app.services.notification_service import NotificationService
from app.utils import (
    average_rating,
    convert_measure,
    format_dimensions,
    format_figure_price,
    parse_release_date,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/figures", tags=["Figures"])

SORT_PATTERN = f"^({'|'.join(SORT_OPTIONS)})$"


# ============================================
# ヘルパー
# ============================================
def _get_figure_or_404(db: Session, figure_id: str) -> Figure:
    figure = db.query(Figure).filter(Figure.id == figure_id).first()
    if not figure:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="フィギュアが見つかりません"
        )
    return figure


def _load_many(db: Session, model, ids: List[str], label: str) -> list:
    """ID指定の関連データを取得（存在しないIDがあれば404）"""
    unique_ids = list(dict.fromkeys(ids))
    if not unique_ids:
        return []
    rows = db.query(model).filter(model.id.in_(unique_ids)).all()
    if len(rows) != len(unique_ids):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"{label}が見つかりません"
        )
    by_id = {row.id: row for row in rows}
    return [by_id[i] for i in unique_ids]


def _check_brand_line(db: Session, brand_id: str, line_id: str) -> None:
    brand = db.query(Brand).filter(Brand.id == brand_id).first()
    if not brand:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="ブランドが見つかりません"
        )
    line = db.query(Line).filter(Line.id == line_id).first()
    if not line:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="製品ラインが見つかりません"
        )
    if line.brand_id != brand.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="製品ラインが指定ブランドに属していません",
        )


def _check_character(db: Session, character_id: Optional[str]) -> None:
    if character_id and not db.query(Character).filter(Character.id == character_id).first():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="キャラクターが見つかりません"
        )


def _apply_release_date(figure: Figure, release_date: Optional[str]) -> None:
    if release_date:
        figure.release_year, figure.release_month, figure.release_day = parse_release_date(release_date)
    else:
        figure.release_year = figure.release_month = figure.release_day = None


def _replace_images(figure: Figure, urls: List[str]) -> None:
    figure.images.clear()
    for index, url in enumerate(urls):
        figure.images.append(FigureImage(url=url, order=index))


def _build_detail(figure: Figure, unit: str) -> FigureDetail:
    """詳細レスポンスを組み立てる（評価平均・件数・寸法変換）"""
    ratings = [review.rating for review in figure.reviews]
    owner_count = sum(1 for uf in figure.user_figures if uf.status == InventoryStatus.OWNED.value)
    wishlist_count = sum(1 for uf in figure.user_figures if uf.status == InventoryStatus.WISHLIST.value)

    return FigureDetail.model_validate(figure).model_copy(
        update={
            "formatted_price": format_figure_price(figure),
            "review_count": len(ratings),
            "owner_count": owner_count,
            "wishlist_count": wishlist_count,
            "avg_rating": average_rating(ratings),
            "dimensions": DimensionsResponse(
                unit=unit,
                height=convert_measure(figure.height_cm, unit),
                width=convert_measure(figure.width_cm, unit),
                depth=convert_measure(figure.depth_cm, unit),
                formatted=format_dimensions(figure.height_cm, figure.width_cm, figure.depth_cm, unit),
            ),
        }
    )


def _notify_if_released(db: Session, figure: Figure, was_released: bool) -> None:
    """未発売→発売済みに変わった場合のみ通知"""
    if not was_released and figure.is_released:
        NotificationService(db).notify_figure_released(figure, commit=False)


# ============================================
# 参照系
# ============================================
@router.get("", response_model=FigureListResponse)
def list_figures(
    brand_id: Optional[str] = Query(None, description="ブランドID"),
    line_id: Optional[str] = Query(None, description="製品ラインID（カンマ区切りで複数指定）"),
    series_id: Optional[str] = Query(None, description="作品ID（カンマ区切りで複数指定）"),
    character_id: Optional[str] = Query(None, description="キャラクターID"),
    tag_id: Optional[str] = Query(None, description="タグID"),
    search: Optional[str] = Query(None, description="名前の部分一致"),
    is_released: Optional[bool] = Query(None, description="発売済みか"),
    min_price: Optional[float] = Query(None, ge=0, description="最低価格"),
    max_price: Optional[float] = Query(None, ge=0, description="最高価格"),
    currency: Currency = Query(Currency.MXN, description="価格絞り込みの通貨"),
    sort: str = Query("newest", pattern=SORT_PATTERN, description="並び順"),
    include_pending: bool = Query(False, description="承認待ちも含める（管理者のみ）"),
    page: int = Query(1, ge=1, description="ページ番号"),
    limit: int = Query(20, ge=1, le=100, description="1ページあたりの取得件数"),
    db: Session = Depends(get_db),
    current_user=Depends(get_optional_user),
):
    """
    カタログ検索（ファセット絞り込み・並び替え・ページング）
    """
    statuses = visible_figure_statuses(db, current_user, include_pending)
    query = figure_query(
        db,
        statuses=statuses,
        brand_id=brand_id,
        line_ids=split_ids(line_id),
        series_ids=split_ids(series_id),
        character_id=character_id,
        tag_id=tag_id,
        search=search,
        is_released=is_released,
        min_price=min_price,
        max_price=max_price,
        currency=currency.value,
    )
    query = apply_sort(query, sort, currency.value)
    figures, pagination = paginate(query, page, limit)

    logger.info(f"カタログ検索: {len(figures)}件取得（総数: {pagination['total']}件）")
    return FigureListResponse(
        figures=[FigureSummary.model_validate(f) for f in figures],
        pagination=pagination,
    )


@router.get("/facets", response_model=FacetsResponse)
def get_figure_facets(
    db: Session = Depends(get_db),
    current_user=Depends(get_optional_user),
):
    """
    カタログの絞り込み候補（ブランド・ライン・作品と件数）
    """
    return get_facets(db, visible_figure_statuses(db, current_user))


@router.get("/{figure_id}", response_model=FigureDetail)
def get_figure(
    figure_id: str,
    unit: str = Query("cm", pattern="^(cm|in)$", description="寸法の単位"),
    db: Session = Depends(get_db),
    current_user=Depends(get_optional_user),
):
    """
    フィギュア詳細（画像・タグ・作品・バリエーション・レビュー付き）
    """
    figure = _get_figure_or_404(db, figure_id)

    # 承認待ちは管理者と投稿者のみ閲覧可能
    if figure.status != ContentStatus.APPROVED.value and figure.status not in visible_figure_statuses(db):
        if not current_user or not (is_admin(current_user.role) or figure.created_by_id == current_user.id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="フィギュアが見つかりません"
            )

    return _build_detail(figure, unit)


# ============================================
# 更新系
# ============================================
@router.post("", response_model=FigureDetail, status_code=status.HTTP_201_CREATED)
def create_figure(
    request: FigureCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    フィギュアを登録（管理者以外の投稿は承認待ち）
    """
    if not request.name or not request.brand_id or not request.line_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="name, brand_id, line_id は必須です",
        )

    _check_brand_line(db, request.brand_id, request.line_id)
    _check_character(db, request.character_id)
    tags = _load_many(db, Tag, request.tag_ids, "タグ")
    series = _load_many(db, Series, request.series_ids, "作品")

    admin = is_admin(current_user.role)
    figure = Figure(
        name=request.name,
        brand_id=request.brand_id,
        line_id=request.line_id,
        character_id=request.character_id,
        description=request.description,
        sku=request.sku,
        size=request.size,
        height_cm=request.height_cm,
        width_cm=request.width_cm,
        depth_cm=request.depth_cm,
        scale=request.scale,
        material=request.material,
        maker=request.maker,
        price_mxn=request.price_mxn,
        price_usd=request.price_usd,
        price_yen=request.price_yen,
        original_price_currency=request.original_price_currency.value,
        is_released=request.is_released,
        is_nsfw=bool(request.is_nsfw),
        status=ContentStatus.APPROVED.value if admin else ContentStatus.PENDING.value,
        created_by_id=current_user.id,
        approved_by_id=current_user.id if admin else None,
        approved_at=datetime.now() if admin else None,
    )
    _apply_release_date(figure, request.release_date)
    _replace_images(figure, request.images)
    figure.tags = tags
    figure.series = series

    db.add(figure)
    db.commit()
    db.refresh(figure)
    invalidate_catalog_cache()

    logger.info(f"フィギュア登録: {figure.name[:40]} ({figure.status}) by {current_user.id}")
    return _build_detail(figure, "cm")


@router.put("/{figure_id}", response_model=FigureDetail)
def update_figure(
    figure_id: str,
    request: FigureUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    フィギュアを更新（指定項目のみ置き換え、管理者のみ）
    """
    figure = _get_figure_or_404(db, figure_id)
    was_released = figure.is_released
    data = request.model_dump(exclude_unset=True)

    brand_id = data.pop("brand_id", None) or figure.brand_id
    line_id = data.pop("line_id", None) or figure.line_id
    if brand_id != figure.brand_id or line_id != figure.line_id:
        _check_brand_line(db, brand_id, line_id)
        figure.brand_id = brand_id
        figure.line_id = line_id

    if "character_id" in data:
        _check_character(db, data["character_id"])
    if "release_date" in data:
        _apply_release_date(figure, data.pop("release_date"))
    if data.get("images") is not None:
        _replace_images(figure, data.pop("images"))
    if data.get("tag_ids") is not None:
        figure.tags = _load_many(db, Tag, data.pop("tag_ids"), "タグ")
    if data.get("series_ids") is not None:
        figure.series = _load_many(db, Series, data.pop("series_ids"), "作品")
    if data.get("original_price_currency") is not None:
        figure.original_price_currency = data.pop("original_price_currency").value

    for field, value in data.items():
        if field in ("images", "tag_ids", "series_ids", "original_price_currency"):
            continue
        if field in ("name", "is_released", "is_nsfw") and value is None:
            continue
        setattr(figure, field, value)

    _notify_if_released(db, figure, was_released)
    db.commit()
    db.refresh(figure)
    invalidate_catalog_cache()

    logger.info(f"フィギュア更新: {figure.id} by {current_user.id}")
    return _build_detail(figure, "cm")


@router.patch("/{figure_id}", response_model=FigureDetail)
def patch_figure(
    figure_id: str,
    request: FigurePatch,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    発売済み・NSFWフラグを更新（管理者のみ）

    未発売→発売済みになった場合、ウィッシュリスト・予約中のユーザーへ通知する
    """
    figure = _get_figure_or_404(db, figure_id)
    was_released = figure.is_released

    if request.is_released is not None:
        figure.is_released = request.is_released
    if request.is_nsfw is not None:
        figure.is_nsfw = request.is_nsfw

    _notify_if_released(db, figure, was_released)
    db.commit()
    db.refresh(figure)
    invalidate_catalog_cache()

    return _build_detail(figure, "cm")


@router.delete("/{figure_id}", response_model=MessageResponse)
def delete_figure(
    figure_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    フィギュアを削除（管理者のみ）
    """
    figure = _get_figure_or_404(db, figure_id)
    db.delete(figure)
    db.commit()
    invalidate_catalog_cache()

    logger.info(f"フィギュア削除: {figure_id} by {current_user.id}")
    return MessageResponse(success=True, message="フィギュアを削除しました")


@router.post(
    "/{figure_id}/variants",
    response_model=VariantResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_variant(
    figure_id: str,
    request: VariantCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    バリエーションを追加（管理者のみ）
    """
    figure = _get_figure_or_404(db, figure_id)

    variant = FigureVariant(
        parent_figure_id=figure.id,
        name=request.name,
        price_mxn=request.price_mxn,
        price_usd=request.price_usd,
        price_yen=request.price_yen,
    )
    for index, url in enumerate(request.images):
        variant.images.append(VariantImage(url=url, order=index))

    db.add(variant)
    db.commit()
    db.refresh(variant)
    return VariantResponse.model_validate(variant)
