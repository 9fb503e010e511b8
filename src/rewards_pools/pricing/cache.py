"""TTL-based caching for token prices."""

import time
from decimal import Decimal


class CacheEntry:
    """
    Cache entry with TTL support.

    Parameters
    ----------
    value : Decimal
        Cached price
    ttl : float
        Time-to-live in seconds
    created_at : float | None
        Creation timestamp. Uses current time if None.

    """

    def __init__(self, value: Decimal, ttl: float, created_at: float | None = None) -> None:
        self.value = value
        self.ttl = ttl
        self.created_at = time.time() if created_at is None else created_at

    def is_expired(self) -> bool:
        """
        Check if cache entry has expired.

        Returns
        -------
        bool
            True if expired, False otherwise

        """
        return (time.time() - self.created_at) > self.ttl


class PriceCache:
    """
    In-memory cache of USD prices keyed by ``(chain, address)``.

    Parameters
    ----------
    default_ttl : float
        Default time-to-live in seconds for cache entries

    """

    def __init__(self, default_ttl: float = 60) -> None:
        self.default_ttl = default_ttl
        self._cache: dict[tuple[str, str], CacheEntry] = {}

    @staticmethod
    def _make_key(chain: str, address: str) -> tuple[str, str]:
        return chain.lower(), address.lower()

    def get(self, chain: str, address: str) -> Decimal | None:
        """
        Get cached price if it exists and hasn't expired.

        Parameters
        ----------
        chain : str
            Chain name
        address : str
            Token address

        Returns
        -------
        Decimal | None
            Cached price if found and valid, None otherwise

        """
        key = self._make_key(chain, address)
        entry = self._cache.get(key)

        if entry is None:
            return None

        if entry.is_expired():
            del self._cache[key]
            return None

        return entry.value

    def set(self, chain: str, address: str, value: Decimal, ttl: float | None = None) -> None:
        """Store a price with TTL (``default_ttl`` if None)."""
        key = self._make_key(chain, address)
        self._cache[key] = CacheEntry(value, self.default_ttl if ttl is None else ttl)

    def clear(self) -> None:
        """Clear all cached entries."""
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
