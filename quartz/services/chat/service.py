"""
Chat and discovery: article Q&A, related questions and search suggestions.
"""

import logging
import re
from typing import Any, Optional

from quartz.clients.openai_client import LLMClient
from quartz.prompts import CHAT_SYSTEM_PROMPT
from quartz.utils.text import clean_topic, extract_json_array
from shared.errors import APIException, ErrorCode, missing_field, upstream_failure

logger = logging.getLogger(__name__)

ARTICLE_CONTEXT_CHARS = 8000
REFERENCE_CHARS = 2000
RELATED_COUNT = 5
SUGGESTION_COUNT = 8
EMPTY_CHAT_REPLY = "I couldn't generate a response."
CHAT_ROLES = ("user", "assistant")

RELATED_SYSTEM_PROMPT = """You are an expert educator. Generate exactly 5 thought-provoking questions about the given topic that would help someone deepen their understanding. The questions should:
- Be engaging and curiosity-sparking
- Cover different aspects of the topic
- Range from foundational to advanced
- Be phrased naturally, as if a curious student is asking

Return ONLY a JSON array of 5 question strings, nothing else. Example format:
["What is X?", "How does Y work?", "Why is Z important?", "What happens when...?", "How does X relate to Y?"]"""

SUGGEST_SYSTEM_PROMPT = """You are a knowledge graph assistant. Given a search query, generate 8 related concept suggestions that form a concept mindmap. Include:
- Direct matches and variations of the query
- Related parent concepts (broader topics)
- Related child concepts (more specific topics)
- Adjacent concepts (related but different domains)

Return ONLY a JSON array of 8 concept names as strings, ordered by relevance. Keep names concise (1-4 words). Example:
["Quantum Mechanics", "Wave-Particle Duality", "Heisenberg Uncertainty", "Quantum Entanglement", "Schrödinger Equation", "Quantum Computing", "Particle Physics", "String Theory"]"""

_NUMBERED_LINE_RE = re.compile(r"^\d+\.")
_LINE_PREFIX_RE = re.compile(r'^[\d."\s-]+')
_LINE_SUFFIX_RE = re.compile(r'",?$')
_QUOTED_RE = re.compile(r'"([^"]+)"')


def chat_system_prompt(topic: Optional[str], article_content: Optional[str]) -> str:
    context = article_content[:ARTICLE_CONTEXT_CHARS] if article_content else "No article content provided."
    return (
        f"{CHAT_SYSTEM_PROMPT}\n\n"
        f'The user is reading an article about "{clean_topic(topic or "")}". '
        "Here is the article content for context:\n\n"
        f"---\n{context}\n---\n\n"
        "Answer questions based on this article and your general knowledge."
    )


def default_questions(topic: str) -> list[str]:
    return [
        f"What is the history of {topic}?",
        f"How does {topic} work in practice?",
        f"What are the key principles of {topic}?",
        f"How is {topic} applied in the real world?",
        f"What are the future developments in {topic}?",
    ]


def parse_question_lines(text: str) -> list[str]:
    """Fallback for replies that are a numbered or quoted list instead of JSON."""
    questions = []
    for line in text.split("\n"):
        stripped = line.strip()
        if not (stripped.startswith('"') or _NUMBERED_LINE_RE.match(stripped)):
            continue
        question = _LINE_SUFFIX_RE.sub("", _LINE_PREFIX_RE.sub("", stripped)).strip()
        if question:
            questions.append(question)
    return questions[:RELATED_COUNT]


class ChatService:
    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def reply(
        self,
        messages: Any,
        topic: Optional[str],
        article_content: Optional[str],
    ) -> str:
        if not isinstance(messages, list):
            raise APIException(
                error_code=ErrorCode.VALIDATION_MISSING_FIELD,
                message="Messages array is required",
                details={"field": "messages"},
            )
        turns = [
            {"role": m.get("role", "user"), "content": str(m.get("content", ""))}
            for m in messages
            if isinstance(m, dict) and m.get("role", "user") in CHAT_ROLES
        ]
        if len(turns) < len(messages):
            logger.warning("[CHAT] dropped %d turns with unsupported roles", len(messages) - len(turns))
        try:
            response = await self.llm.complete(
                chat_system_prompt(topic, article_content),
                messages=turns,
                temperature=0.7,
                max_tokens=1000,
            )
        except Exception as exc:
            logger.error("[CHAT] completion failed topic=%s: %s", topic, exc, exc_info=True)
            raise upstream_failure("Failed to generate response") from exc

        logger.info("[CHAT] topic=%s turns=%d reply_chars=%d", topic, len(turns), len(response))
        return response or EMPTY_CHAT_REPLY

    async def related_questions(self, topic: Optional[str], content: Optional[str]) -> list[str]:
        if not topic:
            raise missing_field("Topic is required", "topic")

        reference = content[:REFERENCE_CHARS] if content else "Generate questions based on the topic name"
        try:
            text = await self.llm.complete(
                RELATED_SYSTEM_PROMPT,
                f"Topic: {topic}\n\nArticle content (for context):\n{reference}\n\nGenerate 5 related questions.",
                temperature=0.8,
                max_tokens=500,
            )
        except Exception as exc:
            logger.error("[RELATED] completion failed topic=%s: %s", topic, exc, exc_info=True)
            raise upstream_failure("Failed to generate questions") from exc

        parsed = extract_json_array(text or "[]")
        if parsed is None:
            questions = parse_question_lines(text or "")
        else:
            questions = [q for q in parsed if isinstance(q, str) and q.strip()]

        defaults = default_questions(topic)
        while len(questions) < RELATED_COUNT:
            questions.append(defaults[len(questions)])
        return questions[:RELATED_COUNT]

    async def suggest(self, query: Optional[str]) -> list[str]:
        if not query or len(query.strip()) < 2:
            return []
        try:
            text = await self.llm.complete(
                SUGGEST_SYSTEM_PROMPT,
                f'Search query: "{query}"\n\nGenerate 8 related concepts.',
                temperature=0.7,
                max_tokens=300,
            )
        except Exception as exc:
            logger.warning("[SUGGEST] completion failed query=%r: %s", query, exc)
            return [query]

        parsed = extract_json_array(text or "[]")
        if parsed is None:
            candidates = _QUOTED_RE.findall(text or "")
        else:
            candidates = [s for s in parsed if isinstance(s, str)]

        lowered = query.lower()
        suggestions = [s for s in candidates if s.lower() != lowered]
        return [query, *suggestions][:SUGGESTION_COUNT]
