"""
Transcription Service

Speech input is transcribed with Whisper, then classified by a deliberately
conservative prompt: only an explicit question or an explicit request to open
a topic is acted on, everything else is ``ignore``.
"""

import logging
from typing import Any, Optional

from quartz.clients.openai_client import LLMClient
from quartz.utils.text import extract_json_object
from shared.errors import APIException, ErrorCode, upstream_failure

from .detector import MIN_BLOB_SIZE

logger = logging.getLogger(__name__)

INTENT_TYPES = ("question", "topic", "ignore")

# Whisper tends to produce these on silence or background noise
HALLUCINATION_PHRASES = (
    "thank you",
    "thanks for watching",
    "thanks for listening",
    "subscribe",
    "like and subscribe",
    "see you next time",
    "bye",
    "goodbye",
    "you",
)

INTENT_SYSTEM_PROMPT = """You analyze speech transcriptions. Be EXTREMELY CONSERVATIVE - default to "ignore" unless there is a CLEAR, EXPLICIT request.

ONLY classify as "question" if ALL conditions are met:
- Contains explicit question words: "what", "why", "how", "when", "where", "who", "can you", "could you", "explain", "tell me"
- Is a complete, coherent question directed at an assistant
- NOT just reading text aloud or talking to themselves

ONLY classify as "topic" if ALL conditions are met:
- Contains explicit navigation/expansion phrases: "go to", "open", "take me to", "show me", "navigate to", "I want to learn about", "expand on", "read more on", "read more about", "elaborate on", "more about", "tell me more about"
- Clearly requests to open a new article/subarticle or expand on a concept
- NOT just mentioning a concept in passing

Classify as "ignore" (DEFAULT) for:
- Reading text aloud without a request
- Statements, observations, comments
- Filler words: "um", "uh", "like", "so", "anyway"
- Greetings/pleasantries: "thank you", "thanks", "okay", "bye", "goodbye", "hello", "hi"
- Incomplete sentences or fragments
- Background conversation snippets
- Self-talk or thinking out loud
- Single words or short phrases without clear intent
- ANYTHING that isn't an explicit, clear request

Return ONLY JSON: {"type":"question|topic|ignore","content":"..."}
- question: include full question
- topic: include ONLY the topic name
- ignore: empty string ""

Examples of IGNORE (these should ALL be ignored):
"thank you for watching" → {"type":"ignore","content":""}
"okay so basically" → {"type":"ignore","content":""}
"quantum mechanics is the study of" → {"type":"ignore","content":""}
"interesting" → {"type":"ignore","content":""}
"black holes" → {"type":"ignore","content":""}
"the fundamental theory" → {"type":"ignore","content":""}
"and that's it" → {"type":"ignore","content":""}
"bye bye" → {"type":"ignore","content":""}
"please see the disclaimer" → {"type":"ignore","content":""}

Examples of QUESTION (explicit questions only):
"What is quantum mechanics?" → {"type":"question","content":"What is quantum mechanics?"}
"Can you explain how photosynthesis works?" → {"type":"question","content":"Can you explain how photosynthesis works?"}
"Why does this happen?" → {"type":"question","content":"Why does this happen?"}

Examples of TOPIC (explicit navigation/expansion):
"Go to black holes" → {"type":"topic","content":"Black Holes"}
"Take me to quantum computing" → {"type":"topic","content":"Quantum Computing"}
"Open the article on DNA" → {"type":"topic","content":"DNA"}
"Expand on photosynthesis" → {"type":"topic","content":"Photosynthesis"}
"Read more on quantum entanglement" → {"type":"topic","content":"Quantum Entanglement"}
"Elaborate on the uncertainty principle" → {"type":"topic","content":"Uncertainty Principle"}
"More about black holes" → {"type":"topic","content":"Black Holes"}"""


def is_hallucination(transcript: str) -> bool:
    text = transcript.lower().strip()
    return any(text == phrase or text == phrase + "." for phrase in HALLUCINATION_PHRASES)


def parse_intent(raw: str) -> dict[str, str]:
    """``{"type", "content"}`` from a classifier reply; anything unclear is ignore."""
    parsed = extract_json_object(raw) or {}
    intent_type = parsed.get("type")
    if intent_type not in INTENT_TYPES:
        return {"type": "ignore", "content": ""}
    content = parsed.get("content") or ""
    return {"type": intent_type, "content": content if isinstance(content, str) else str(content)}


def is_actionable(result: dict[str, Any]) -> bool:
    """Whether a transcription result should trigger a question or navigation."""
    content = (result.get("content") or "").strip()
    return len(content) > 2 and result.get("type") in ("question", "topic")


class TranscriptionService:
    def __init__(self, llm: LLMClient, min_blob_size: int = MIN_BLOB_SIZE):
        self.llm = llm
        self.min_blob_size = min_blob_size

    async def transcribe(self, filename: Optional[str], data: Optional[bytes], content_type: Optional[str]) -> dict[str, str]:
        if data is None:
            raise APIException(
                error_code=ErrorCode.VALIDATION_MISSING_FIELD,
                message="Audio file is required",
                details={"field": "audio"},
            )
        if len(data) < self.min_blob_size:
            raise APIException(
                error_code=ErrorCode.VALIDATION_ERROR,
                message="Audio too short",
                details={"bytes": len(data), "minimum": self.min_blob_size},
            )

        try:
            transcript = await self.llm.transcribe(filename or "audio.webm", data, content_type or "audio/webm")
        except Exception as exc:
            logger.error("[TRANSCRIBE] whisper failed bytes=%d: %s", len(data), exc, exc_info=True)
            raise upstream_failure("Failed to transcribe audio") from exc

        if not transcript:
            raise APIException(error_code=ErrorCode.VALIDATION_ERROR, message="No speech detected")

        if is_hallucination(transcript):
            logger.info("[TRANSCRIBE] filtered hallucination %r", transcript)
            return {"transcript": transcript, "type": "ignore", "content": ""}

        try:
            raw = await self.llm.complete(INTENT_SYSTEM_PROMPT, transcript, temperature=0.1, max_tokens=150)
        except Exception as exc:
            logger.error("[TRANSCRIBE] intent classification failed: %s", exc, exc_info=True)
            raise upstream_failure("Failed to transcribe audio") from exc

        intent = parse_intent(raw)
        logger.info("[TRANSCRIBE] chars=%d intent=%s", len(transcript), intent["type"])
        return {"transcript": transcript, **intent}
