"""
Quiz Service

Generates five-question multiple-choice quizzes and pages through the
questions already cached for a topic before asking the model for more.
"""

import logging
from typing import Any, Optional

from pydantic import ValidationError

from quartz.clients.openai_client import LLMClient
from quartz.storage.content_cache import ContentCache
from quartz.utils.text import extract_json_object
from shared.errors import missing_field, upstream_failure

from .schemas import QuizQuestion

logger = logging.getLogger(__name__)

QUIZ_SYSTEM_PROMPT = """You are a quiz generator. Create a multiple-choice quiz to test understanding of the topic.

Rules:
- Generate exactly 5 questions
- Each question has exactly 4 options (A, B, C, D)
- Questions should range from basic recall to deeper understanding
- Include clear, educational explanations for correct answers
- Make incorrect options plausible but clearly wrong

Output ONLY valid JSON in this exact format:
{
  "questions": [
    {
      "question": "Question text here?",
      "options": ["Option A", "Option B", "Option C", "Option D"],
      "correctIndex": 0,
      "explanation": "Explanation of why this is correct"
    }
  ]
}

Make sure correctIndex is 0-3 (the index of the correct option in the options array)."""

QUIZ_TEMPERATURE = 0.7
QUIZ_MAX_TOKENS = 2000
PAGE_SIZE = 5
REFERENCE_CHARS = 2000


def quiz_prompt(topic: str, content: Optional[str]) -> str:
    reference = content[:REFERENCE_CHARS] if content else "Generate from the topic name"
    return f'Create a quiz about "{topic}". Use this content as reference:\n\n{reference}'


def parse_questions(raw: str) -> list[QuizQuestion]:
    """Valid questions from a model reply; malformed entries are dropped."""
    parsed = extract_json_object(raw)
    if parsed is None or not isinstance(parsed.get("questions"), list):
        return []
    questions = []
    for item in parsed["questions"]:
        try:
            questions.append(QuizQuestion.model_validate(item))
        except ValidationError as exc:
            logger.debug("[GAMIFY] dropped malformed question: %s", exc.errors()[:1])
    return questions


class QuizService:
    def __init__(self, llm: LLMClient, cache: ContentCache):
        self.llm = llm
        self.cache = cache

    async def questions(self, topic: Optional[str], content: Optional[str], start_index: Optional[int]) -> dict[str, Any]:
        if not topic:
            raise missing_field("Topic is required", "topic")

        cached = self.cache.get_quiz_questions(topic) or []
        start = max(0, start_index or 0)
        if start < len(cached):
            end = min(start + PAGE_SIZE, len(cached))
            logger.info("[GAMIFY] topic=%s cached page %d-%d of %d", topic, start, end, len(cached))
            return {"questions": cached[start:end], "startIndex": start, "endIndex": end}

        try:
            raw = await self.llm.complete(
                QUIZ_SYSTEM_PROMPT,
                quiz_prompt(topic, content),
                temperature=QUIZ_TEMPERATURE,
                max_tokens=QUIZ_MAX_TOKENS,
            )
        except Exception as exc:
            logger.error("[GAMIFY] request failed topic=%s: %s", topic, exc, exc_info=True)
            raise upstream_failure("Failed to generate quiz") from exc

        if not raw:
            raise upstream_failure("Failed to generate quiz")

        fresh = parse_questions(raw)
        if not fresh:
            logger.error("[GAMIFY] unparseable quiz topic=%s raw=%r", topic, raw[:500])
            raise upstream_failure("Failed to parse quiz")

        new_rows = [q.model_dump(exclude={"id"}) for q in fresh]
        known = {row.get("question") for row in cached}
        merged = cached + [row for row in new_rows if row["question"] not in known]
        self.cache.cache_quiz_questions(topic, merged)
        logger.info("[GAMIFY] topic=%s fresh=%d cached_total=%d", topic, len(new_rows), len(merged))

        return {"questions": new_rows, "fresh": True}
