"""
Review Model - レビューテーブル
"""
from datetime import datetime
from typing import TYPE_CHECKING
from sqlalchemy import String, Integer, DateTime, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base, new_id

if TYPE_CHECKING:
    from .user import User
    from .figure import Figure


class Review(Base):
    """レビューテーブル（ユーザー×フィギュアで1件）"""
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("user_id", "figure_id", name="uq_review_user_figure"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    figure_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("figures.id", ondelete="CASCADE"), nullable=False, index=True
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="reviews")
    figure: Mapped["Figure"] = relationship("Figure", back_populates="reviews")
    images: Mapped[list["ReviewImage"]] = relationship(
        "ReviewImage",
        back_populates="review",
        cascade="all, delete-orphan",
        order_by="ReviewImage.order",
    )


class ReviewImage(Base):
    __tablename__ = "review_images"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    review_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False, index=True
    )
    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    review: Mapped["Review"] = relationship("Review", back_populates="images")
