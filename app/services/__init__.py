"""
アプリケーションサービス（キャッシュ・メール・バッチ・通知）
"""

from .cache_service import catalog_cache, CatalogCacheService
from .email_service import email_service, EmailService

__all__ = [
    "catalog_cache",
    "CatalogCacheService",
    "email_service",
    "EmailService",
]
