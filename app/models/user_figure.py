"""
UserFigure Model - コレクション（ウィッシュリスト・予約・所持）テーブル
"""
from datetime import datetime
from typing import Optional, TYPE_CHECKING
from sqlalchemy import String, Float, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base, new_id

if TYPE_CHECKING:
    from .user import User
    from .figure import Figure


class UserFigure(Base):
    """ユーザーのコレクションテーブル"""
    __tablename__ = "user_figures"
    __table_args__ = (
        UniqueConstraint("user_id", "figure_id", name="uq_user_figure"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    figure_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("figures.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    user_price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    # YYYY-MM
    preorder_month: Mapped[Optional[str]] = mapped_column(String(7), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="user_figures")
    figure: Mapped["Figure"] = relationship("Figure", back_populates="user_figures")
