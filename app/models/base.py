"""
共通定義 - Base / 列挙型 / ID生成
"""
import enum
import uuid

from app.database import Base


def new_id() -> str:
    """主キー用のUUID文字列を生成"""
    return str(uuid.uuid4())


class ContentStatus(str, enum.Enum):
    """投稿コンテンツのモデレーション状態"""
    PENDING = "PENDING"
    APPROVED = "APPROVED"


class UserRole(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"
    SUPERADMIN = "SUPERADMIN"


class InventoryStatus(str, enum.Enum):
    """ユーザーとフィギュアの関係"""
    WISHLIST = "WISHLIST"
    PREORDER = "PREORDER"
    OWNED = "OWNED"


class Currency(str, enum.Enum):
    MXN = "MXN"
    USD = "USD"
    YEN = "YEN"


class HomeSectionType(str, enum.Enum):
    QUERY = "QUERY"
    LIST = "LIST"
    PRESET = "PRESET"


__all__ = [
    "Base",
    "new_id",
    "ContentStatus",
    "UserRole",
    "InventoryStatus",
    "Currency",
    "HomeSectionType",
]
