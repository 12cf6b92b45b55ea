# app/core/cache.py
"""In-memory TTL cache for product list pages keyed by (offset, limit)."""
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    data: Any
    expires_at: float


class ProductCache:
    """
    Кэш страниц списка товаров. Живёт, пока работает процесс.
    Запись с истёкшим сроком удаляется при чтении.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self.hits = 0
        self.misses = 0
        logger.debug(f"ProductCache initialized: ttl={ttl}s")

    @staticmethod
    def make_key(offset: int, limit: int) -> str:
        return f"{offset}:{limit}"

    def get(self, offset: int, limit: int) -> Optional[Any]:
        key = self.make_key(offset, limit)
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            logger.debug(f"Cache MISS: {key}")
            return None
        if self._clock() > entry.expires_at:
            del self._entries[key]
            self.misses += 1
            logger.debug(f"Cache EXPIRED: {key}")
            return None
        self.hits += 1
        logger.debug(f"Cache HIT: {key}")
        return entry.data

    def set(self, offset: int, limit: int, data: Any) -> None:
        key = self.make_key(offset, limit)
        self._entries[key] = CacheEntry(data=data, expires_at=self._clock() + self.ttl)
        logger.debug(f"Cache SET: {key}")

    def clear(self) -> int:
        """Очистить весь кэш. Возвращает количество удалённых записей."""
        count = len(self._entries)
        self._entries.clear()
        logger.info(f"Product cache cleared: {count} entries removed")
        return count

    def stats(self) -> Dict[str, int]:
        return {
            "entries": len(self._entries),
            "hits": self.hits,
            "misses": self.misses,
        }

    def __len__(self) -> int:
        return len(self._entries)
