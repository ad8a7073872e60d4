"""
Review API エンドポイント
所持しているフィギュアのレビュー投稿・編集
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.database import get_db
from app.dependencies import is_admin
from app.models.base import InventoryStatus
from app.models.figure import Figure
from app.models.review import Review, ReviewImage
from app.models.user import User
from app.models.user_figure import UserFigure
from app.schemas.base import MessageResponse
from app.schemas.review import MAX_REVIEW_IMAGES, ReviewCreate, ReviewResponse, ReviewUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reviews", tags=["Reviews"])


def _get_editable_review(db: Session, review_id: str, user: User) -> Review:
    """投稿者または管理者のみ操作可能"""
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="レビューが見つかりません"
        )
    if review.user_id != user.id and not is_admin(user.role):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="このレビューを編集する権限がありません"
        )
    return review


def _replace_images(review: Review, urls: List[str]) -> None:
    # 上限を超えた分は捨てる
    review.images = [
        ReviewImage(url=url, order=index)
        for index, url in enumerate(urls[:MAX_REVIEW_IMAGES])
    ]


@router.get("", response_model=List[ReviewResponse])
def get_reviews(
    figure_id: Optional[str] = Query(None),
    user_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """レビュー一覧（新しい順）"""
    query = db.query(Review)
    if figure_id:
        query = query.filter(Review.figure_id == figure_id)
    if user_id:
        query = query.filter(Review.user_id == user_id)

    reviews = query.order_by(Review.created_at.desc(), Review.id.asc()).all()
    return [ReviewResponse.model_validate(r) for r in reviews]


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    request: ReviewCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    レビューを投稿

    - コレクションで OWNED のフィギュアのみ
    - ユーザー×フィギュアで1件まで
    """
    figure = db.query(Figure).filter(Figure.id == request.figure_id).first()
    if not figure:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="フィギュアが見つかりません"
        )

    owned = (
        db.query(UserFigure)
        .filter(
            UserFigure.user_id == current_user.id,
            UserFigure.figure_id == request.figure_id,
            UserFigure.status == InventoryStatus.OWNED.value,
        )
        .first()
    )
    if not owned:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="所持しているフィギュアのみレビューできます",
        )

    existing = (
        db.query(Review)
        .filter(Review.user_id == current_user.id, Review.figure_id == request.figure_id)
        .first()
    )
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="このフィギュアのレビューは既に投稿されています",
        )

    review = Review(
        user_id=current_user.id,
        figure_id=figure.id,
        rating=request.rating,
        title=request.title,
        description=request.description,
    )
    _replace_images(review, request.images)
    db.add(review)
    db.commit()
    db.refresh(review)

    logger.info(f"レビュー投稿: figure={figure.id}, user={current_user.id}, rating={review.rating}")
    return ReviewResponse.model_validate(review)


@router.put("/{review_id}", response_model=ReviewResponse)
def update_review(
    review_id: str,
    request: ReviewUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    review = _get_editable_review(db, review_id, current_user)
    data = request.model_dump(exclude_unset=True)

    for field in ("rating", "title", "description"):
        if data.get(field) is not None:
            setattr(review, field, data[field])
    if data.get("images") is not None:
        _replace_images(review, data["images"])

    db.commit()
    db.refresh(review)
    return ReviewResponse.model_validate(review)


@router.delete("/{review_id}", response_model=MessageResponse)
def delete_review(
    review_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    review = _get_editable_review(db, review_id, current_user)
    db.delete(review)
    db.commit()

    return MessageResponse(success=True, message="レビューを削除しました")
