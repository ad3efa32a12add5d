"""
Article Service

Generates encyclopedia articles as a stream of sections. A request is first
turned into a ``GenerationPlan`` (validation, usage limits, cache lookup) so
that rejections can still be answered with a plain JSON status before the
event stream starts.
"""

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any, Optional

from quartz.clients.openai_client import LLMClient
from quartz.clients.supabase_client import AuthUser
from quartz.prompts import CONTINUE_ARTICLE_PROMPT, NEW_ARTICLE_PROMPT, WIKI_SYSTEM_PROMPT
from quartz.services.billing.usage import AnonymousUsage, UsageLimitExceeded, UsageService
from quartz.storage.content_cache import ContentCache
from quartz.utils.text import clean_topic, normalize_topic, to_title_case
from shared.errors import missing_field

from .streaming import DisconnectCheck, SectionStream, format_sse, replay_sections

logger = logging.getLogger(__name__)

ARTICLE_TEMPERATURE = 0.7
ARTICLE_MAX_TOKENS = 4000


@dataclass
class GenerationPlan:
    topic: str  # display form, e.g. "Black Holes"
    cache_key: str
    existing_content: str = ""
    cached_content: Optional[str] = None

    @property
    def is_continuation(self) -> bool:
        return bool(self.existing_content)


class ArticleService:
    """Article generation with caching and daily limits."""

    def __init__(
        self,
        llm: LLMClient,
        cache: ContentCache,
        usage: UsageService,
        anonymous_usage: AnonymousUsage,
        enforce_limits: bool = True,
        site_url: str = "https://tryquartz.wiki",
    ):
        self.llm = llm
        self.cache = cache
        self.usage = usage
        self.anonymous_usage = anonymous_usage
        self.enforce_limits = enforce_limits
        self.site_url = site_url.rstrip("/")

    def prepare(
        self,
        topic: Any,
        existing_content: Optional[str],
        user: Optional[AuthUser],
        client_id: str,
    ) -> GenerationPlan:
        """Validate and check limits; raises APIException / UsageLimitExceeded."""
        if not topic or not isinstance(topic, str):
            raise missing_field("Topic is required", "topic")

        if self.enforce_limits:
            if user is not None:
                result = self.usage.check_usage(user.id)
                if not result.can_generate:
                    logger.info("[GENERATE] usage limit user=%s count=%d", user.id, result.current_count)
                    raise UsageLimitExceeded(result.current_count, result.limit)
            else:
                anon = self.anonymous_usage.check(client_id)
                if not anon["canGenerate"]:
                    logger.info("[GENERATE] anonymous limit client=%s", client_id)
                    raise UsageLimitExceeded(anon["limit"] - anon["remaining"], anon["limit"])

        display_topic = clean_topic(topic)
        plan = GenerationPlan(
            topic=display_topic,
            cache_key=normalize_topic(display_topic),
            existing_content=existing_content or "",
        )

        if not plan.is_continuation:
            plan.cached_content = self.cache.get_article(plan.cache_key)

        if self.enforce_limits and not plan.is_continuation and not plan.cached_content:
            if user is not None:
                self.usage.increment_usage(user.id)
            else:
                self.anonymous_usage.increment(client_id)

        logger.info(
            "[GENERATE] topic=%s continuation=%s cached=%s user=%s",
            plan.cache_key,
            plan.is_continuation,
            bool(plan.cached_content),
            user.id if user else "anonymous",
        )
        return plan

    def user_prompt(self, plan: GenerationPlan) -> str:
        if plan.is_continuation:
            return CONTINUE_ARTICLE_PROMPT.format(topic=plan.topic, existing=plan.existing_content)
        return NEW_ARTICLE_PROMPT.format(topic=plan.topic)

    async def stream(self, plan: GenerationPlan, is_disconnected: DisconnectCheck) -> AsyncIterator[str]:
        """SSE frames for the plan: replayed from cache or streamed from the model."""
        if plan.cached_content:
            for frame in replay_sections(plan.cached_content):
                yield frame
            yield format_sse("done", {"content": plan.cached_content, "topic": plan.topic, "cached": True})
            return

        relay = SectionStream(
            self.llm.stream(
                WIKI_SYSTEM_PROMPT,
                self.user_prompt(plan),
                temperature=ARTICLE_TEMPERATURE,
                max_tokens=ARTICLE_MAX_TOKENS,
            ),
            is_disconnected,
        )

        try:
            async for frame in relay.frames():
                yield frame
        except Exception as exc:
            logger.error("[GENERATE] stream failed topic=%s: %s", plan.cache_key, exc, exc_info=True)
            yield format_sse("error", {"message": str(exc) or "Unknown error"})
            return

        if relay.cancelled:
            logger.warning("[GENERATE] client disconnected topic=%s; not caching", plan.cache_key)
            return

        new_content = relay.content
        final_content = plan.existing_content + new_content if plan.is_continuation else new_content
        if final_content.strip():
            self.cache.cache_article(plan.cache_key, final_content)
        else:
            logger.warning("[GENERATE] empty article topic=%s; not caching", plan.cache_key)

        yield format_sse(
            "done",
            {
                "content": new_content if plan.is_continuation else final_content,
                "fullContent": final_content,
                "topic": plan.topic,
                "isContinuation": plan.is_continuation,
            },
        )
        logger.info("[GENERATE] topic=%s finished chars=%d", plan.cache_key, len(final_content))

    def page_metadata(self, topic_slug: str) -> dict[str, Any]:
        """Title, description and share-card fields for ``/page/<topic>``."""
        title = f"{to_title_case(clean_topic(topic_slug))} - Quartz"
        subject = title[: -len(" - Quartz")]
        description = (
            f"Learn about {subject} on Quartz. Explore concepts, simplify explanations, "
            "and dive deeper into any topic."
        )
        url = f"{self.site_url}/page/{topic_slug}"
        return {
            "title": title,
            "description": description,
            "canonical": url,
            "openGraph": {
                "title": title,
                "description": description,
                "url": url,
                "siteName": "Quartz",
                "type": "article",
                "locale": "en_US",
            },
            "twitter": {"card": "summary_large_image", "title": title, "description": description},
        }
