"""Panel navigation and client-side caches."""

from .client_cache import ClientCache, RecentTopics, cache_key
from .panels import PanelStack, PanelState

__all__ = ["ClientCache", "PanelStack", "PanelState", "RecentTopics", "cache_key"]
