import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

from api.models.data_models import CacheStats
from utils.constants import CACHE_PREFIX_NETWORK, CACHE_PREFIX_ANALYSIS, CACHE_PREFIX_SCORE

logger = logging.getLogger(__name__)


class CacheKeys:
    """Cache key builders, one namespace per operation kind"""

    @staticmethod
    def network_tx(wallet_address: str, network_key: str) -> str:
        return f"{CACHE_PREFIX_NETWORK}:{wallet_address.lower()}:{network_key}"

    @staticmethod
    def wallet_analysis(wallet_address: str, mode: str) -> str:
        return f"{CACHE_PREFIX_ANALYSIS}:{mode}:{wallet_address.lower()}"

    @staticmethod
    def wallet_score(wallet_address: str) -> str:
        return f"{CACHE_PREFIX_SCORE}:{wallet_address.lower()}"


class CacheStore:
    """In-memory TTL cache shared by all services of one process.

    Entries expire once their TTL has elapsed and are dropped lazily on
    the next read, or by ``cleanup()``. Memory grows between sweeps.
    Keys are independent; concurrent writes to one key are last write wins.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._hits = 0
        self._misses = 0
        self._expired = 0

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None

        value, expires_at = entry
        if self._clock() > expires_at:
            self._entries.pop(key, None)
            self._expired += 1
            self._misses += 1
            return None

        self._hits += 1
        logger.debug(f"Cache hit: {key}")
        return value

    def set(self, key: str, value: Any, ttl: float):
        if ttl <= 0:
            raise ValueError(f"TTL must be positive, got {ttl}")
        self._entries[key] = (value, self._clock() + ttl)

    def clear(self):
        count = len(self._entries)
        self._entries.clear()
        logger.info(f"Cache cleared ({count} entries)")

    def cleanup(self) -> int:
        """Drop expired entries, returns how many were removed"""
        now = self._clock()
        expired_keys = [k for k, (_, expires_at) in self._entries.items() if now > expires_at]
        for key in expired_keys:
            del self._entries[key]

        self._expired += len(expired_keys)
        if expired_keys:
            logger.info(f"🧹 Cleaned up {len(expired_keys)} expired cache entries")
        return len(expired_keys)

    def stats(self) -> CacheStats:
        self.cleanup()
        return CacheStats(
            entry_count=len(self._entries),
            hits=self._hits,
            misses=self._misses,
            expired=self._expired,
            keys=sorted(self._entries.keys()),
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and self._clock() <= entry[1]
