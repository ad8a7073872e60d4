"""
Figure Model - フィギュアテーブル
画像・バリエーション・タグ/作品の中間テーブルを含む
"""
from datetime import datetime
from typing import Optional, TYPE_CHECKING
from sqlalchemy import (
    Column,
    String,
    Integer,
    Float,
    Boolean,
    DateTime,
    Text,
    ForeignKey,
    Table,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base, ContentStatus, Currency, new_id

if TYPE_CHECKING:
    from .brand import Brand
    from .line import Line
    from .series import Series
    from .character import Character
    from .tag import Tag
    from .review import Review
    from .user import User
    from .user_figure import UserFigure
    from .figure_list import ListItem


# フィギュア ⇔ タグ
figure_tags = Table(
    "figure_tags",
    Base.metadata,
    Column("figure_id", String(36), ForeignKey("figures.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", String(36), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)

# フィギュア ⇔ 作品
figure_series = Table(
    "figure_series",
    Base.metadata,
    Column("figure_id", String(36), ForeignKey("figures.id", ondelete="CASCADE"), primary_key=True),
    Column("series_id", String(36), ForeignKey("series.id", ondelete="CASCADE"), primary_key=True),
)


class Figure(Base):
    """フィギュアテーブル"""
    __tablename__ = "figures"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    brand_id: Mapped[str] = mapped_column(String(36), ForeignKey("brands.id"), nullable=False, index=True)
    line_id: Mapped[str] = mapped_column(String(36), ForeignKey("lines.id"), nullable=False, index=True)
    character_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("characters.id", ondelete="SET NULL"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sku: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    size: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    height_cm: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    width_cm: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    depth_cm: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    scale: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    material: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    maker: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    price_mxn: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    price_usd: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    price_yen: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    original_price_currency: Mapped[str] = mapped_column(
        String(3), default=Currency.YEN.value, nullable=False
    )
    release_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    release_month: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    release_day: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_released: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    is_nsfw: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=ContentStatus.APPROVED.value, nullable=False, index=True
    )
    created_by_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    approved_by_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    brand: Mapped["Brand"] = relationship("Brand", back_populates="figures")
    line: Mapped["Line"] = relationship("Line", back_populates="figures")
    character: Mapped[Optional["Character"]] = relationship("Character", back_populates="figures")
    images: Mapped[list["FigureImage"]] = relationship(
        "FigureImage",
        back_populates="figure",
        cascade="all, delete-orphan",
        order_by="FigureImage.order",
    )
    variants: Mapped[list["FigureVariant"]] = relationship(
        "FigureVariant",
        back_populates="parent_figure",
        cascade="all, delete-orphan",
    )
    tags: Mapped[list["Tag"]] = relationship(
        "Tag",
        secondary=figure_tags,
        back_populates="figures",
    )
    series: Mapped[list["Series"]] = relationship(
        "Series",
        secondary=figure_series,
        back_populates="figures",
    )
    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="figure",
        cascade="all, delete-orphan",
        order_by="Review.created_at.desc()",
    )
    user_figures: Mapped[list["UserFigure"]] = relationship(
        "UserFigure",
        back_populates="figure",
        cascade="all, delete-orphan",
    )
    list_items: Mapped[list["ListItem"]] = relationship(
        "ListItem",
        back_populates="figure",
        cascade="all, delete-orphan",
    )
    created_by: Mapped[Optional["User"]] = relationship("User", foreign_keys=[created_by_id])
    approved_by: Mapped[Optional["User"]] = relationship("User", foreign_keys=[approved_by_id])

    @property
    def release_date(self) -> Optional[str]:
        """発売日を YYYY / YYYY-MM / YYYY-MM-DD 形式で返す"""
        if not self.release_year:
            return None
        if not self.release_month:
            return f"{self.release_year}"
        if not self.release_day:
            return f"{self.release_year}-{self.release_month:02d}"
        return f"{self.release_year}-{self.release_month:02d}-{self.release_day:02d}"

    @property
    def release_month_key(self) -> Optional[str]:
        """発売月（YYYY-MM）。月が未定なら None"""
        if not self.release_year or not self.release_month:
            return None
        return f"{self.release_year}-{self.release_month:02d}"

    @property
    def image(self) -> Optional[str]:
        """カバー画像（並び順の先頭）"""
        return self.images[0].url if self.images else None


class FigureImage(Base):
    """フィギュア画像テーブル"""
    __tablename__ = "figure_images"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    figure_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("figures.id", ondelete="CASCADE"), nullable=False, index=True
    )
    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    figure: Mapped["Figure"] = relationship("Figure", back_populates="images")


class FigureVariant(Base):
    """バリエーション（限定版・カラー違いなど）"""
    __tablename__ = "figure_variants"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    parent_figure_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("figures.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    price_mxn: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    price_usd: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    price_yen: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)

    parent_figure: Mapped["Figure"] = relationship("Figure", back_populates="variants")
    images: Mapped[list["VariantImage"]] = relationship(
        "VariantImage",
        back_populates="variant",
        cascade="all, delete-orphan",
        order_by="VariantImage.order",
    )


class VariantImage(Base):
    __tablename__ = "variant_images"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    variant_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("figure_variants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    variant: Mapped["FigureVariant"] = relationship("FigureVariant", back_populates="images")
