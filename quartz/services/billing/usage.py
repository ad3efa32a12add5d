"""
Daily generation limits.

Signed-in users are counted in ``quartz_usage`` (one row per user per UTC
day) unless they hold an active subscription. Anonymous callers are counted
per client id in the hot cache.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from quartz.utils.dates import parse_timestamp, utcnow
from shared.errors import APIException, ErrorCode
from shared.storage.cache import CacheLayer

logger = logging.getLogger(__name__)

USAGE_TABLE = "quartz_usage"
SUBSCRIPTIONS_TABLE = "quartz_subscriptions"


@dataclass
class UsageResult:
    can_generate: bool
    current_count: int
    limit: Optional[int]  # None means unlimited
    is_subscribed: bool


class UsageService:
    """Usage counters and subscription status backed by Supabase."""

    def __init__(
        self,
        supabase: Optional[Any],
        free_daily_limit: int = 3,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.supabase = supabase
        self.free_daily_limit = free_daily_limit
        self.clock = clock

    def _today(self) -> str:
        return self.clock().date().isoformat()

    def _first(self, table: str, columns: str, **filters: Any) -> Optional[dict[str, Any]]:
        query = self.supabase.table(table).select(columns)
        for column, value in filters.items():
            query = query.eq(column, value)
        rows = query.limit(1).execute().data or []
        return rows[0] if rows else None

    def is_subscribed(self, user_id: str) -> bool:
        if self.supabase is None:
            return False
        subscription = self._first(SUBSCRIPTIONS_TABLE, "status, current_period_end", user_id=user_id)
        if not subscription or subscription.get("status") != "active":
            return False
        period_end = parse_timestamp(subscription.get("current_period_end"))
        return period_end is not None and period_end > self.clock()

    def check_usage(self, user_id: str) -> UsageResult:
        if self.is_subscribed(user_id):
            return UsageResult(can_generate=True, current_count=0, limit=None, is_subscribed=True)

        current = 0
        if self.supabase is not None:
            usage = self._first(USAGE_TABLE, "article_count", user_id=user_id, date=self._today())
            current = int(usage["article_count"]) if usage else 0

        return UsageResult(
            can_generate=current < self.free_daily_limit,
            current_count=current,
            limit=self.free_daily_limit,
            is_subscribed=False,
        )

    def increment_usage(self, user_id: str) -> None:
        if self.supabase is None:
            return
        today = self._today()
        existing = self._first(USAGE_TABLE, "id, article_count", user_id=user_id, date=today)
        if existing:
            self.supabase.table(USAGE_TABLE).update(
                {"article_count": existing["article_count"] + 1, "updated_at": self.clock().isoformat()}
            ).eq("id", existing["id"]).execute()
            logger.debug("[USAGE] user=%s date=%s count=%d", user_id, today, existing["article_count"] + 1)
        else:
            self.supabase.table(USAGE_TABLE).insert(
                {"user_id": user_id, "date": today, "article_count": 1}
            ).execute()

    def get_usage_stats(self, user_id: str) -> dict[str, Any]:
        result = self.check_usage(user_id)
        return {
            "used": result.current_count,
            "limit": result.limit if result.limit is not None else "unlimited",
            "isSubscribed": result.is_subscribed,
        }


class AnonymousUsage:
    """Per-client daily counter for callers without a session."""

    TTL_SECONDS = 2 * 24 * 60 * 60

    def __init__(self, cache: CacheLayer, limit: int = 3, clock: Callable[[], datetime] = utcnow):
        self.cache = cache
        self.limit = limit
        self.clock = clock

    def _key(self, client_id: str) -> str:
        return f"anon-usage:{client_id}"

    def get(self, client_id: str) -> dict[str, Any]:
        today = self.clock().date().isoformat()
        stored = self.cache.get(self._key(client_id))
        if not isinstance(stored, dict) or stored.get("date") != today:
            return {"date": today, "count": 0}
        return stored

    def check(self, client_id: str) -> dict[str, Any]:
        count = self.get(client_id)["count"]
        return {
            "canGenerate": count < self.limit,
            "remaining": max(0, self.limit - count),
            "limit": self.limit,
        }

    def increment(self, client_id: str) -> int:
        usage = self.get(client_id)
        usage["count"] += 1
        self.cache.set(self._key(client_id), usage, ttl=self.TTL_SECONDS)
        return usage["count"]


class UsageLimitExceeded(APIException):
    """429 raised before generation when the caller has no generations left today."""

    def __init__(self, current_count: int, limit: Optional[int]):
        super().__init__(
            error_code=ErrorCode.USAGE_LIMIT_EXCEEDED,
            message="Daily limit reached",
            details={"currentUsage": current_count, "limit": limit},
        )
        self.current_count = current_count
        self.limit = limit

    def to_response(self) -> dict[str, Any]:
        return {
            "error": "usage_limit",
            "message": "Daily limit reached",
            "currentUsage": self.current_count,
            "limit": self.limit,
        }
