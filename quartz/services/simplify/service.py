"""
Simplify Service

Rewrites an article for a younger or less specialised reader, streamed
section by section exactly like article generation.
"""

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any, Optional

from quartz.clients.openai_client import LLMClient
from quartz.services.articles.streaming import DisconnectCheck, SectionStream, format_sse, replay_sections
from quartz.storage.content_cache import ContentCache
from shared.errors import APIException, ErrorCode

logger = logging.getLogger(__name__)

SIMPLIFY_TEMPERATURE = 0.8
SIMPLIFY_MAX_TOKENS = 4000

SIMPLIFICATION_LEVELS = {
    1: "Expert",
    2: "College",
    3: "High School",
    4: "Middle School",
    5: "Elementary",
}
MAX_LEVEL = max(SIMPLIFICATION_LEVELS)

_CONCEPT_AND_STRUCTURE = (
    "Keep [[concept]] brackets for clickable terms. "
    "Maintain the same section structure with ## and ### headings."
)

LEVEL_PROMPTS = {
    "College": (
        "Rewrite this content for a college undergraduate. Use academic language but explain "
        f"complex terms. {_CONCEPT_AND_STRUCTURE}"
    ),
    "High School": (
        "Rewrite this content for a high school student (ages 14-18). Use simpler vocabulary, "
        f"add relatable examples, and break down complex ideas. {_CONCEPT_AND_STRUCTURE}"
    ),
    "Middle School": (
        "Rewrite this content for a middle school student (ages 11-13). Use everyday words, lots "
        "of analogies to things kids know, and shorter sentences. Make it engaging! "
        f"{_CONCEPT_AND_STRUCTURE}"
    ),
    "Elementary": (
        "Rewrite this content so a 5-year-old can understand it. Use very simple words, fun "
        "comparisons to toys/animals/food/family, and short sentences. Make it exciting and "
        "playful! Examples:\n"
        '- "It\'s like when you..."\n'
        '- "You know how..."\n'
        '- "Think of it like your favorite..."\n'
        f"{_CONCEPT_AND_STRUCTURE}"
    ),
}


def resolve_level(target_level: Any) -> tuple[int, str]:
    """Accept a level number or name; anything unrecognised is Elementary."""
    if isinstance(target_level, int) and not isinstance(target_level, bool):
        name = SIMPLIFICATION_LEVELS.get(target_level)
        if name:
            return target_level, name
    if isinstance(target_level, str):
        for number, name in SIMPLIFICATION_LEVELS.items():
            if name.lower() == target_level.strip().lower():
                return number, name
        if target_level.strip().isdigit():
            return resolve_level(int(target_level.strip()))
    return MAX_LEVEL, SIMPLIFICATION_LEVELS[MAX_LEVEL]


def level_prompt(level_name: str) -> str:
    return LEVEL_PROMPTS.get(level_name, LEVEL_PROMPTS["Elementary"])


@dataclass
class SimplifyPlan:
    content: str
    topic: Optional[str]
    level: int
    level_name: str
    cached_content: Optional[str] = None


class SimplifyService:
    def __init__(self, llm: LLMClient, cache: ContentCache):
        self.llm = llm
        self.cache = cache

    def prepare(self, content: Any, topic: Optional[str], target_level: Any) -> SimplifyPlan:
        if not content or target_level in (None, "", 0):
            raise APIException(
                error_code=ErrorCode.VALIDATION_MISSING_FIELD,
                message="Content and target level are required",
            )
        level, level_name = resolve_level(target_level)
        plan = SimplifyPlan(content=str(content), topic=topic or None, level=level, level_name=level_name)
        if plan.topic:
            plan.cached_content = self.cache.get_simplification(plan.topic, level)
        logger.info(
            "[SIMPLIFY] topic=%s level=%s cached=%s",
            plan.topic,
            level_name,
            bool(plan.cached_content),
        )
        return plan

    async def stream(self, plan: SimplifyPlan, is_disconnected: DisconnectCheck) -> AsyncIterator[str]:
        if plan.cached_content:
            for frame in replay_sections(plan.cached_content):
                yield frame
            yield format_sse("done", {"content": plan.cached_content, "level": plan.level_name, "cached": True})
            return

        relay = SectionStream(
            self.llm.stream(
                level_prompt(plan.level_name),
                f'Simplify this article about "{plan.topic or "this topic"}":\n\n{plan.content}',
                temperature=SIMPLIFY_TEMPERATURE,
                max_tokens=SIMPLIFY_MAX_TOKENS,
            ),
            is_disconnected,
        )
        try:
            async for frame in relay.frames():
                yield frame
        except Exception as exc:
            logger.error("[SIMPLIFY] stream failed topic=%s: %s", plan.topic, exc, exc_info=True)
            yield format_sse("error", {"message": str(exc) or "Unknown error"})
            return

        if relay.cancelled:
            return

        content = relay.content
        if plan.topic and content.strip():
            self.cache.cache_simplification(plan.topic, plan.level, content)
        yield format_sse("done", {"content": content, "level": plan.level_name})
