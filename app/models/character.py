"""
Character Model - キャラクターテーブル
"""
from datetime import datetime
from typing import Optional, TYPE_CHECKING
from sqlalchemy import String, DateTime, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base, ContentStatus, new_id

if TYPE_CHECKING:
    from .series import Series
    from .figure import Figure
    from .user import User


class Character(Base):
    """キャラクターテーブル"""
    __tablename__ = "characters"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    series_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("series.id", ondelete="SET NULL"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=ContentStatus.APPROVED.value, nullable=False, index=True
    )
    created_by_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    series: Mapped[Optional["Series"]] = relationship("Series", back_populates="characters")
    figures: Mapped[list["Figure"]] = relationship("Figure", back_populates="character")
    created_by: Mapped[Optional["User"]] = relationship("User")
