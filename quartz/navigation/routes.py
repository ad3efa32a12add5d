"""
Navigation Routes

Endpoints:
- GET /api/recent-topics - Recently visited topics for the calling client
- POST /api/recent-topics - Record a visit
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from quartz.services.auth.dependencies import client_id
from shared.errors import missing_field
from shared.storage.cache import CacheLayer

from .client_cache import MAX_RECENT_TOPICS, RecentTopics

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["navigation"])

RECENT_TOPICS_TTL = 90 * 24 * 60 * 60

# Hot cache instance (initialized by main app)
_cache: Optional[CacheLayer] = None


def initialize_service(cache: CacheLayer) -> CacheLayer:
    global _cache
    _cache = cache
    return _cache


def get_cache() -> CacheLayer:
    if _cache is None:
        raise RuntimeError("Navigation cache not initialized")
    return _cache


def _key(caller: str) -> str:
    return f"recent-topics:{caller}"


def load_recent(caller: str) -> RecentTopics:
    stored = get_cache().get(_key(caller))
    return RecentTopics(stored if isinstance(stored, list) else [])


class RecentTopicRequest(BaseModel):
    topic: Optional[str] = None


@router.get("/recent-topics")
def recent_topics(
    limit: int = Query(default=10, ge=1, le=MAX_RECENT_TOPICS),
    caller: str = Depends(client_id),
) -> dict[str, Any]:
    return {"topics": load_recent(caller).latest(limit)}


@router.post("/recent-topics")
def add_recent_topic(body: RecentTopicRequest, caller: str = Depends(client_id)) -> dict[str, Any]:
    if not body.topic or not body.topic.strip():
        raise missing_field("Topic is required", "topic")
    recent = load_recent(caller)
    recent.add(body.topic.strip())
    get_cache().set(_key(caller), recent.entries, ttl=RECENT_TOPICS_TTL)
    logger.debug("[RECENT] client=%s topics=%d", caller, len(recent.entries))
    return {"topics": recent.latest()}
