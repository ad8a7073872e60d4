"""
Series Model - 作品（シリーズ）テーブル
"""
from datetime import datetime
from typing import Optional, TYPE_CHECKING
from sqlalchemy import String, DateTime, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base, ContentStatus, new_id
from .figure import figure_series

if TYPE_CHECKING:
    from .character import Character
    from .figure import Figure
    from .user import User


class Series(Base):
    """作品テーブル"""
    __tablename__ = "series"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=ContentStatus.APPROVED.value, nullable=False, index=True
    )
    created_by_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    figures: Mapped[list["Figure"]] = relationship(
        "Figure",
        secondary=figure_series,
        back_populates="series",
    )
    characters: Mapped[list["Character"]] = relationship(
        "Character",
        back_populates="series",
    )
    created_by: Mapped[Optional["User"]] = relationship("User")
