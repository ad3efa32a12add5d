from .cache import CacheConfig, CacheLayer, get_cache

__all__ = ["CacheConfig", "CacheLayer", "get_cache"]
