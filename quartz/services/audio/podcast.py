"""
Podcast generation: a Host/Guest dialogue script, then one TTS clip per line
joined into a single mp3.

A failed clip does not fail the podcast; it is skipped and reported through
``audioError``.
"""

import base64
import json
import logging
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from quartz.clients.openai_client import LLMClient
from quartz.clients.speech import SpeechSynthesizer
from quartz.storage.content_cache import ContentCache
from quartz.utils.text import extract_json_object
from shared.errors import missing_field, upstream_failure

logger = logging.getLogger(__name__)

PODCAST_SYSTEM_PROMPT = """You are a podcast script writer. Generate an engaging two-person conversation between a Host and a Guest Expert about the topic.

Rules:
- Host asks curious, thoughtful questions that a listener might have
- Guest explains concepts clearly with analogies and examples
- Keep the conversation natural and flowing
- Include moments of surprise, humor, or "aha!" revelations
- Make complex topics accessible
- Each speaker turn should be 1-3 sentences

Output ONLY valid JSON in this exact format:
{
  "dialogue": [
    {"speaker": "Host", "text": "..."},
    {"speaker": "Guest", "text": "..."},
    ...
  ]
}

Generate 8-10 exchanges (16-20 lines total) to keep audio generation manageable."""

PODCAST_TEMPERATURE = 0.85
PODCAST_MAX_TOKENS = 1500
REFERENCE_CHARS = 2000
SEGMENT_FAILURE_MESSAGE = "Some audio segments failed to generate"


class DialogueLine(BaseModel):
    speaker: str
    text: str


def podcast_prompt(topic: str, content: Optional[str]) -> str:
    reference = content[:REFERENCE_CHARS] if content else "Generate from the topic name"
    return f'Create a podcast conversation about "{topic}". Use this content as reference:\n\n{reference}'


def parse_dialogue(raw: str) -> Optional[list[DialogueLine]]:
    """The ``dialogue`` list of a script reply, or None when it is unusable."""
    parsed = extract_json_object(raw)
    if parsed is None or not isinstance(parsed.get("dialogue"), list):
        return None
    try:
        return [DialogueLine.model_validate(line) for line in parsed["dialogue"]]
    except ValidationError:
        return None


def to_data_url(chunks: list[bytes]) -> Optional[str]:
    if not chunks:
        return None
    return "data:audio/mp3;base64," + base64.b64encode(b"".join(chunks)).decode("ascii")


class PodcastService:
    def __init__(self, llm: LLMClient, speech: SpeechSynthesizer, cache: ContentCache):
        self.llm = llm
        self.speech = speech
        self.cache = cache

    async def create(self, topic: Optional[str], content: Optional[str]) -> dict[str, Any]:
        if not topic:
            raise missing_field("Topic is required", "topic")

        cached = self.cache.get_podcast(topic)
        if cached:
            try:
                dialogue = json.loads(cached["script"])
            except (TypeError, json.JSONDecodeError):
                dialogue = None
            if isinstance(dialogue, list):
                logger.info("[PODCAST] cache hit topic=%s", topic)
                return {"dialogue": dialogue, "audioUrl": cached["audio_url"], "audioError": None, "cached": True}

        try:
            raw = await self.llm.complete(
                PODCAST_SYSTEM_PROMPT,
                podcast_prompt(topic, content),
                temperature=PODCAST_TEMPERATURE,
                max_tokens=PODCAST_MAX_TOKENS,
            )
        except Exception as exc:
            logger.error("[PODCAST] script request failed topic=%s: %s", topic, exc, exc_info=True)
            raise upstream_failure("Failed to generate podcast") from exc

        if not raw:
            raise upstream_failure("Failed to generate podcast script")

        dialogue = parse_dialogue(raw)
        if dialogue is None:
            logger.error("[PODCAST] unparseable script topic=%s raw=%r", topic, raw[:500])
            raise upstream_failure("Failed to parse podcast script")

        logger.info("[PODCAST] topic=%s lines=%d", topic, len(dialogue))
        chunks, segment_failed = await self._speak(dialogue)

        lines = [line.model_dump() for line in dialogue]
        if chunks and not segment_failed:
            self.cache.cache_podcast(topic, json.dumps(lines), b"".join(chunks))

        return {
            "dialogue": lines,
            "audioUrl": to_data_url(chunks),
            "audioError": SEGMENT_FAILURE_MESSAGE if segment_failed else None,
        }

    async def _speak(self, dialogue: list[DialogueLine]) -> tuple[list[bytes], bool]:
        chunks: list[bytes] = []
        failed = False
        for index, line in enumerate(dialogue, start=1):
            role = "host" if line.speaker == "Host" else "guest"
            try:
                chunks.append(await self.speech.synthesize(line.text, role=role))
            except Exception as exc:
                logger.warning("[PODCAST] clip %d/%d failed (%s): %s", index, len(dialogue), line.speaker, exc)
                failed = True
        return chunks, failed
