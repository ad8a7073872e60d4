"""
Tag Model - タグテーブル（PVC, Prize, Limited など）
"""
from datetime import datetime
from typing import TYPE_CHECKING
from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base, new_id
from .figure import figure_tags

if TYPE_CHECKING:
    from .figure import Figure


class Tag(Base):
    """タグテーブル"""
    __tablename__ = "tags"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)

    # Relationships
    figures: Mapped[list["Figure"]] = relationship(
        "Figure",
        secondary=figure_tags,
        back_populates="tags",
    )
