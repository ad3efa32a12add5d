"""
Audio Service

Narrates an article (or a one-line stand-in for a bare topic) as mp3.
Topic narrations are uploaded to storage so repeat requests can be served
from the stored file.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from quartz.clients.speech import SpeechSynthesizer
from quartz.storage.content_cache import ContentCache
from quartz.utils.text import strip_markdown_for_speech
from shared.errors import APIException, ErrorCode, upstream_failure

logger = logging.getLogger(__name__)

# OpenAI TTS rejects input over 4096 characters
MAX_SPEECH_CHARS = 4000


@dataclass
class Narration:
    audio: Optional[bytes] = None
    audio_url: Optional[str] = None  # stored copy, when one exists
    cached: bool = False


def speech_text(topic: Optional[str], content: Optional[str]) -> str:
    """The text actually sent to TTS: markup stripped and length capped."""
    text = strip_markdown_for_speech(content or f"An article about {topic}")
    if len(text) > MAX_SPEECH_CHARS:
        text = text[:MAX_SPEECH_CHARS] + "..."
    return text


class AudioService:
    def __init__(self, speech: SpeechSynthesizer, cache: ContentCache):
        self.speech = speech
        self.cache = cache

    async def narrate(
        self,
        topic: Optional[str],
        content: Optional[str],
        simplification_level: int = 0,
    ) -> Narration:
        if not topic and not content:
            raise APIException(
                error_code=ErrorCode.VALIDATION_MISSING_FIELD,
                message="Topic or content is required",
            )

        if topic:
            stored = self.cache.get_audio(topic, simplification_level)
            if stored:
                logger.info("[AUDIFY] cache hit topic=%s level=%d", topic, simplification_level)
                return Narration(audio_url=stored, cached=True)

        text = speech_text(topic, content)
        try:
            audio = await self.speech.synthesize(text, role="narrator")
        except Exception as exc:
            logger.error("[AUDIFY] synthesis failed topic=%s: %s", topic, exc, exc_info=True)
            raise upstream_failure("Failed to generate audio") from exc

        url = self.cache.cache_audio(topic, simplification_level, audio) if topic else None
        logger.info("[AUDIFY] topic=%s chars=%d bytes=%d stored=%s", topic, len(text), len(audio), bool(url))
        return Narration(audio=audio, audio_url=url)
