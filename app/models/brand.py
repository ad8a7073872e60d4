"""
Brand Model - ブランド（メーカー）テーブル
"""
from datetime import datetime
from typing import Optional, TYPE_CHECKING
from sqlalchemy import String, DateTime, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base, ContentStatus, new_id

if TYPE_CHECKING:
    from .line import Line
    from .figure import Figure
    from .user import User


class Brand(Base):
    """ブランドテーブル"""
    __tablename__ = "brands"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    logo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=ContentStatus.APPROVED.value, nullable=False, index=True
    )
    created_by_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    lines: Mapped[list["Line"]] = relationship(
        "Line",
        back_populates="brand",
        cascade="all, delete-orphan",
        order_by="Line.name",
    )
    figures: Mapped[list["Figure"]] = relationship(
        "Figure",
        back_populates="brand",
        cascade="all, delete-orphan"
    )
    created_by: Mapped[Optional["User"]] = relationship("User")
