"""
Browser-side caches: recently generated articles and recently visited topics.

Both work over a string key/value store shaped like ``localStorage``; a
plain dict serves in tests and on the server.
"""

import json
import logging
import re
import time
from collections.abc import Callable, MutableMapping
from typing import Any, Optional

logger = logging.getLogger(__name__)

CACHE_PREFIX = "wikia_"
CACHE_VERSION = "v1_"
MAX_CACHED_ARTICLES = 50
MAX_RECENT_TOPICS = 20

_WHITESPACE_RE = re.compile(r"\s+")


def _now_ms() -> int:
    return int(time.time() * 1000)


def cache_key(topic: str) -> str:
    return CACHE_PREFIX + CACHE_VERSION + _WHITESPACE_RE.sub("_", topic.lower())


class ClientCache:
    def __init__(self, store: MutableMapping[str, str], clock: Callable[[], int] = _now_ms):
        self.store = store
        self.clock = clock

    def get(self, topic: str) -> Optional[dict[str, Any]]:
        raw = self.store.get(cache_key(topic))
        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return None

    def save(self, topic: str, content: str) -> None:
        entry = {"content": content, "timestamp": self.clock(), "topic": topic}
        self.store[cache_key(topic)] = json.dumps(entry)
        self.prune()

    def save_simplified(self, topic: str, simplified_content: str) -> None:
        entry = self.get(topic)
        if entry is None:
            return
        entry["simplifiedContent"] = simplified_content
        self.store[cache_key(topic)] = json.dumps(entry)

    def prune(self, keep: int = MAX_CACHED_ARTICLES) -> int:
        """Drop the oldest article entries beyond ``keep``; returns how many went."""
        stamped = []
        for key in [k for k in self.store if k.startswith(CACHE_PREFIX)]:
            try:
                stamped.append((json.loads(self.store[key])["timestamp"], key))
            except (json.JSONDecodeError, KeyError, TypeError):
                continue
        if len(stamped) <= keep:
            return 0
        stamped.sort()
        doomed = stamped[: len(stamped) - keep]
        for _, key in doomed:
            del self.store[key]
        logger.debug("Pruned %d cached articles", len(doomed))
        return len(doomed)


class RecentTopics:
    """Most recently visited topics, newest first, deduplicated ignoring case."""

    def __init__(self, entries: Optional[list[Any]] = None, clock: Callable[[], int] = _now_ms):
        self.clock = clock
        self.entries = self._upgrade(entries or [])

    def _upgrade(self, entries: list[Any]) -> list[dict[str, Any]]:
        # Older clients stored a bare list of names
        now = self.clock()
        upgraded = []
        for entry in entries:
            if isinstance(entry, str):
                upgraded.append({"name": entry, "timestamp": now})
            elif isinstance(entry, dict) and entry.get("name"):
                upgraded.append({"name": entry["name"], "timestamp": entry.get("timestamp", now)})
        return upgraded

    def add(self, topic: str) -> None:
        lowered = topic.lower()
        self.entries = [e for e in self.entries if e["name"].lower() != lowered]
        self.entries.insert(0, {"name": topic, "timestamp": self.clock()})
        del self.entries[MAX_RECENT_TOPICS:]

    def latest(self, limit: int = 10) -> list[dict[str, Any]]:
        return self.entries[:limit]
