"""
FigureList Model - ユーザー作成リスト / リスト項目テーブル
"""
from datetime import datetime
from typing import Optional, TYPE_CHECKING
from sqlalchemy import String, Integer, Boolean, DateTime, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base, new_id

if TYPE_CHECKING:
    from .user import User
    from .figure import Figure


class FigureList(Base):
    """リストテーブル"""
    __tablename__ = "lists"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_official: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    created_by_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    created_by: Mapped["User"] = relationship("User", back_populates="lists")
    items: Mapped[list["ListItem"]] = relationship(
        "ListItem",
        back_populates="figure_list",
        cascade="all, delete-orphan",
        order_by="ListItem.order",
    )


class ListItem(Base):
    """リスト項目テーブル"""
    __tablename__ = "list_items"
    __table_args__ = (
        UniqueConstraint("list_id", "figure_id", name="uq_list_figure"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    list_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("lists.id", ondelete="CASCADE"), nullable=False, index=True
    )
    figure_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("figures.id", ondelete="CASCADE"), nullable=False, index=True
    )
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)

    # Relationships
    figure_list: Mapped["FigureList"] = relationship("FigureList", back_populates="items")
    figure: Mapped["Figure"] = relationship("Figure", back_populates="list_items")
