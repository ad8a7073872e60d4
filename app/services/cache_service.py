"""
カタログキャッシュサービス
TTL付きメモリキャッシュでファセット集計などの重いクエリ結果を保存
"""

import threading
from typing import Any, Dict, Optional
from cachetools import TTLCache

from app.config import settings

# ファセット集計のキャッシュキー
FACETS_CACHE_KEY = "catalog:facets"


class CatalogCacheService:
    """カタログ集計結果のメモリキャッシュ"""

    def __init__(
        self,
        ttl: int = settings.CACHE_TTL_SECONDS,
        max_size: int = settings.CACHE_MAX_SIZE,
    ):
        """
        Args:
            ttl: キャッシュ有効期限（秒）
            max_size: 最大キャッシュ数
        """
        self._cache: TTLCache = TTLCache(maxsize=max_size, ttl=ttl)
        self._lock = threading.Lock()
        self._stats = {
            "hits": 0,
            "misses": 0,
            "sets": 0,
            "invalidations": 0,
        }

    def _normalize_key(self, key: str) -> str:
        return key.strip().lower()

    def get(self, key: str) -> Optional[Any]:
        """
        キャッシュから値を取得

        Returns:
            キャッシュ値 or None（キャッシュミス）
        """
        key = self._normalize_key(key)
        with self._lock:
            result = self._cache.get(key)
            if result is not None:
                self._stats["hits"] += 1
                return result
            self._stats["misses"] += 1
            return None

    def set(self, key: str, value: Any) -> None:
        key = self._normalize_key(key)
        with self._lock:
            self._cache[key] = value
            self._stats["sets"] += 1

    def clear(self) -> int:
        """
        全キャッシュをクリア（カタログ更新時に呼ばれる）

        Returns:
            クリアしたキャッシュ数
        """
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
            self._stats["invalidations"] += 1
            return count

    def get_stats(self) -> Dict[str, Any]:
        """
        キャッシュ統計を取得

        Returns:
            統計情報
        """
        with self._lock:
            total_requests = self._stats["hits"] + self._stats["misses"]
            hit_rate = (
                self._stats["hits"] / total_requests * 100
                if total_requests > 0 else 0
            )
            return {
                "hits": self._stats["hits"],
                "misses": self._stats["misses"],
                "sets": self._stats["sets"],
                "invalidations": self._stats["invalidations"],
                "hit_rate": round(hit_rate, 2),
                "current_size": len(self._cache),
                "max_size": self._cache.maxsize,
                "ttl_seconds": self._cache.ttl,
            }


# シングルトンインスタンス
catalog_cache = CatalogCacheService()
