"""
Content Cache - generated content keyed by topic and model version.

Supabase tables are the system of record; the hot cache (Redis or the
in-memory fallback) sits in front of them. Reads fall through hot cache ->
Supabase and refill the hot cache with the row's remaining lifetime.
Any cache failure is logged and treated as a miss so generation can proceed.
"""

import logging
import re
from datetime import UTC, datetime, timedelta
from typing import Any, Optional

from quartz.utils.dates import parse_timestamp
from quartz.utils.text import normalize_topic
from shared.storage.cache import CacheLayer

logger = logging.getLogger(__name__)

ARTICLES_TABLE = "quartz_articles"
SIMPLIFICATIONS_TABLE = "quartz_simplifications"
AUDIO_TABLE = "quartz_audio"
PODCASTS_TABLE = "quartz_podcasts"
QUIZ_TABLE = "quartz_quiz_questions"


class ContentCache:
    """Read-through / write-through cache for articles and derived media."""

    def __init__(
        self,
        supabase: Optional[Any],
        hot_cache: CacheLayer,
        model_version: str,
        ttl_days: int = 30,
        audio_bucket: str = "quartz-audio",
    ):
        self.supabase = supabase
        self.hot = hot_cache
        self.model_version = model_version
        self.ttl = timedelta(days=ttl_days)
        self.audio_bucket = audio_bucket

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def is_cache_valid(self, created_at: Any, now: Optional[datetime] = None) -> bool:
        created = parse_timestamp(created_at)
        if created is None:
            return False
        return (now or datetime.now(UTC)) - created < self.ttl

    def _remaining_seconds(self, created_at: Any) -> int:
        created = parse_timestamp(created_at) or datetime.now(UTC)
        remaining = self.ttl - (datetime.now(UTC) - created)
        return max(1, int(remaining.total_seconds()))

    def _hot_key(self, kind: str, topic: str, *parts: Any) -> str:
        suffix = ":".join(str(p) for p in parts)
        key = f"{kind}:{self.model_version}:{topic}"
        return f"{key}:{suffix}" if suffix else key

    def _file_stem(self, topic: str) -> str:
        return re.sub(r"\s+", "-", topic)

    def _lookup(
        self, table: str, hot_key: str, columns: str, filters: dict[str, Any]
    ) -> Optional[dict[str, Any]]:
        cached = self.hot.get(hot_key)
        if cached is not None and self.is_cache_valid(cached.get("created_at")):
            return cached

        if self.supabase is None:
            return None

        try:
            query = self.supabase.table(table).select(f"{columns}, created_at")
            for column, value in filters.items():
                query = query.eq(column, value)
            rows = query.limit(1).execute().data or []
        except Exception as exc:
            logger.warning("[CACHE] %s lookup failed: %s", table, exc)
            return None

        if not rows or not self.is_cache_valid(rows[0].get("created_at")):
            return None

        row = rows[0]
        self.hot.set(hot_key, row, ttl=self._remaining_seconds(row.get("created_at")))
        return row

    def _store(self, table: str, hot_key: str, row: dict[str, Any], on_conflict: str) -> None:
        row = {**row, "model_version": self.model_version, "created_at": datetime.now(UTC).isoformat()}
        self.hot.set(hot_key, row, ttl=int(self.ttl.total_seconds()))

        if self.supabase is None:
            return
        try:
            self.supabase.table(table).upsert(row, on_conflict=on_conflict).execute()
        except Exception as exc:
            logger.error("[CACHE] failed to write %s: %s", table, exc)

    def _upload_audio(self, file_name: str, audio: bytes) -> Optional[str]:
        if self.supabase is None:
            return None
        try:
            bucket = self.supabase.storage.from_(self.audio_bucket)
            bucket.upload(
                file_name,
                audio,
                file_options={"content-type": "audio/mpeg", "upsert": "true"},
            )
            return bucket.get_public_url(file_name)
        except Exception as exc:
            logger.error("[CACHE] storage upload failed file=%s: %s", file_name, exc)
            return None

    # ------------------------------------------------------------------
    # articles
    # ------------------------------------------------------------------

    def get_article(self, topic: str) -> Optional[str]:
        key = normalize_topic(topic)
        row = self._lookup(
            ARTICLES_TABLE,
            self._hot_key("article", key),
            "content",
            {"topic": key, "model_version": self.model_version},
        )
        return (row.get("content") or None) if row else None

    def cache_article(self, topic: str, content: str) -> None:
        key = normalize_topic(topic)
        self._store(
            ARTICLES_TABLE,
            self._hot_key("article", key),
            {"topic": key, "content": content},
            on_conflict="topic,model_version",
        )

    # ------------------------------------------------------------------
    # simplifications
    # ------------------------------------------------------------------

    def get_simplification(self, topic: str, level: int) -> Optional[str]:
        key = normalize_topic(topic)
        row = self._lookup(
            SIMPLIFICATIONS_TABLE,
            self._hot_key("simplify", key, level),
            "content",
            {"topic": key, "level": level, "model_version": self.model_version},
        )
        return (row.get("content") or None) if row else None

    def cache_simplification(self, topic: str, level: int, content: str) -> None:
        key = normalize_topic(topic)
        self._store(
            SIMPLIFICATIONS_TABLE,
            self._hot_key("simplify", key, level),
            {"topic": key, "level": level, "content": content},
            on_conflict="topic,level,model_version",
        )

    # ------------------------------------------------------------------
    # narration audio
    # ------------------------------------------------------------------

    def get_audio(self, topic: str, simplification_level: int = 0) -> Optional[str]:
        key = normalize_topic(topic)
        row = self._lookup(
            AUDIO_TABLE,
            self._hot_key("audio", key, simplification_level),
            "audio_url",
            {"topic": key, "simplification_level": simplification_level, "model_version": self.model_version},
        )
        return row["audio_url"] if row else None

    def cache_audio(self, topic: str, simplification_level: int, audio: bytes) -> Optional[str]:
        key = normalize_topic(topic)
        file_name = f"{self._file_stem(key)}_level{simplification_level}_{self.model_version}.mp3"
        url = self._upload_audio(file_name, audio)
        if url is None:
            return None
        self._store(
            AUDIO_TABLE,
            self._hot_key("audio", key, simplification_level),
            {"topic": key, "simplification_level": simplification_level, "audio_url": url},
            on_conflict="topic,simplification_level,model_version",
        )
        return url

    # ------------------------------------------------------------------
    # podcasts
    # ------------------------------------------------------------------

    def get_podcast(self, topic: str) -> Optional[dict[str, str]]:
        key = normalize_topic(topic)
        row = self._lookup(
            PODCASTS_TABLE,
            self._hot_key("podcast", key),
            "script, audio_url",
            {"topic": key, "model_version": self.model_version},
        )
        if not row:
            return None
        return {"script": row["script"], "audio_url": row["audio_url"]}

    def cache_podcast(self, topic: str, script: str, audio: bytes) -> Optional[str]:
        key = normalize_topic(topic)
        url = self._upload_audio(f"podcast_{self._file_stem(key)}_{self.model_version}.mp3", audio)
        if url is None:
            return None
        self._store(
            PODCASTS_TABLE,
            self._hot_key("podcast", key),
            {"topic": key, "script": script, "audio_url": url},
            on_conflict="topic,model_version",
        )
        return url

    # ------------------------------------------------------------------
    # quiz questions
    # ------------------------------------------------------------------

    def get_quiz_questions(self, topic: str) -> Optional[list[dict[str, Any]]]:
        key = normalize_topic(topic)
        row = self._lookup(
            QUIZ_TABLE,
            self._hot_key("quiz", key),
            "questions",
            {"topic": key, "model_version": self.model_version},
        )
        return list(row["questions"]) if row else None

    def cache_quiz_questions(self, topic: str, questions: list[dict[str, Any]]) -> None:
        key = normalize_topic(topic)
        self._store(
            QUIZ_TABLE,
            self._hot_key("quiz", key),
            {"topic": key, "questions": questions},
            on_conflict="topic,model_version",
        )
