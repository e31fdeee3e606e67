from .tiered_cache import CacheEntry, TieredCache
from .ttl_config import TTL, TtlPolicy

__all__ = ["CacheEntry", "TieredCache", "TTL", "TtlPolicy"]
