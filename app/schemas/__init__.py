"""
Pydantic Schemas for FiguraCollect
Based on app/models
"""

from .base import BaseSchema, MessageResponse
from .user import UserPublic, UserResponse, ProfileUpdateRequest, PasswordChangeRequest
from .taxonomy import (
    BrandRef,
    LineRef,
    SeriesRef,
    CharacterRef,
    TagResponse,
    BrandCreate,
    BrandUpdate,
    LineCreate,
    LineUpdate,
    SeriesCreate,
    SeriesUpdate,
    CharacterCreate,
    CharacterUpdate,
    TagCreate,
    BrandResponse,
    LineResponse,
    SeriesResponse,
    CharacterResponse,
)
from .figure import (
    FigureCreate,
    FigureUpdate,
    FigurePatch,
    VariantCreate,
    VariantResponse,
    FigureSummary,
    FigureDetail,
    FigureListResponse,
    FacetsResponse,
    BrandDetail,
    LineDetail,
    SeriesDetail,
    CharacterDetail,
    SearchResponse,
)
from .inventory import InventoryCreate, InventoryUpdate, InventoryItemResponse, InventoryListResponse
from .figure_list import (
    ListCreate,
    ListUpdate,
    ListItemAdd,
    ListReorderRequest,
    ListSummary,
    ListDetail,
)
from .review import ReviewCreate, ReviewUpdate, ReviewResponse
from .notification import NotificationResponse, NotificationListResponse, MarkReadRequest
from .calendar import CalendarResponse, ReleasesResponse, TimelineResponse
from .home_section import (
    HomeSectionConfig,
    HomeSectionCreate,
    HomeSectionUpdate,
    HomeSectionReorderRequest,
    HomeSectionResponse,
    HomeResponse,
)
from .admin import (
    PendingResponse,
    ApproveRequest,
    AdminUserResponse,
    RoleUpdateRequest,
    SystemConfigRequest,
    SystemConfigResponse,
)

__all__ = [
    "BaseSchema",
    "MessageResponse",
    "UserPublic",
    "UserResponse",
    "ProfileUpdateRequest",
    "PasswordChangeRequest",
    "BrandRef",
    "LineRef",
    "SeriesRef",
    "CharacterRef",
    "TagResponse",
    "BrandCreate",
    "BrandUpdate",
    "LineCreate",
    "LineUpdate",
    "SeriesCreate",
    "SeriesUpdate",
    "CharacterCreate",
    "CharacterUpdate",
    "TagCreate",
    "BrandResponse",
    "LineResponse",
    "SeriesResponse",
    "CharacterResponse",
    "FigureCreate",
    "FigureUpdate",
    "FigurePatch",
    "VariantCreate",
    "VariantResponse",
    "FigureSummary",
    "FigureDetail",
    "FigureListResponse",
    "FacetsResponse",
    "BrandDetail",
    "LineDetail",
    "SeriesDetail",
    "CharacterDetail",
    "SearchResponse",
    "InventoryCreate",
    "InventoryUpdate",
    "InventoryItemResponse",
    "InventoryListResponse",
    "ListCreate",
    "ListUpdate",
    "ListItemAdd",
    "ListReorderRequest",
    "ListSummary",
    "ListDetail",
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "NotificationResponse",
    "NotificationListResponse",
    "MarkReadRequest",
    "CalendarResponse",
    "ReleasesResponse",
    "TimelineResponse",
    "HomeSectionConfig",
    "HomeSectionCreate",
    "HomeSectionUpdate",
    "HomeSectionReorderRequest",
    "HomeSectionResponse",
    "HomeResponse",
    "PendingResponse",
    "ApproveRequest",
    "AdminUserResponse",
    "RoleUpdateRequest",
    "SystemConfigRequest",
    "SystemConfigResponse",
]
