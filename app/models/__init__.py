"""
SQLAlchemy Models for FiguraCollect

Usage:
    from app.models import User, Brand, Line, Figure, etc.
    # または
    from app.models import Base
"""

from .base import Base
from .user import User
from .figure import Figure, FigureImage, FigureVariant, VariantImage, figure_tags, figure_series
from .brand import Brand
from .line import Line
from .series import Series
from .character import Character
from .tag import Tag
from .user_figure import UserFigure
from .figure_list import FigureList, ListItem
from .review import Review, ReviewImage
from .notification import Notification
from .home_section import HomeSection
from .system_config import SystemConfiguration

__all__ = [
    "Base",
    "User",
    "Brand",
    "Line",
    "Series",
    "Character",
    "Tag",
    "Figure",
    "FigureImage",
    "FigureVariant",
    "VariantImage",
    "figure_tags",
    "figure_series",
    "UserFigure",
    "FigureList",
    "ListItem",
    "Review",
    "ReviewImage",
    "Notification",
    "HomeSection",
    "SystemConfiguration",
]
