"""
Video script prompts for short-form (portrait) and explainer (landscape)
videos. Only the prompt is produced; rendering is left to external tools.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from quartz.clients.openai_client import LLMClient
from shared.errors import missing_field, upstream_failure

logger = logging.getLogger(__name__)

_PROMPT_RULES = "Keep the prompt under 500 characters. Focus on VISUAL descriptions only."


@dataclass(frozen=True)
class VideoFormat:
    name: str
    system_prompt: str
    request_label: str
    framing: str
    context_chars: int
    temperature: float
    failure_message: str


PORTRAIT = VideoFormat(
    name="tiktok",
    system_prompt=(
        "You are an expert at creating prompts for AI video generation. Create a detailed, visual "
        "prompt for a TikTok-style educational video.\n\n"
        "The prompt should describe:\n"
        "- Shot type, subject, action, setting, and lighting\n"
        "- Visual style (modern, engaging, colorful)\n"
        "- Dynamic movement and energy appropriate for TikTok\n"
        "- Camera movements and transitions\n\n"
        f"{_PROMPT_RULES}"
    ),
    request_label="TikTok video prompt",
    framing="The video should be vertical (portrait 9:16), 8 seconds, visually engaging.",
    context_chars=1000,
    temperature=0.9,
    failure_message="Failed to generate TikTok content",
)

LANDSCAPE = VideoFormat(
    name="explainer",
    system_prompt=(
        "You are an expert at creating prompts for AI video generation. Create a detailed, visual "
        "prompt for a YouTube-style educational explainer video.\n\n"
        "The prompt should describe:\n"
        "- Shot type, subject, action, setting, and lighting\n"
        "- Professional, educational visual style\n"
        "- Clear visual explanations with diagrams or visual metaphors\n"
        "- Smooth camera movements and transitions\n\n"
        f"{_PROMPT_RULES}"
    ),
    request_label="YouTube explainer video prompt",
    framing="The video should be horizontal (landscape 16:9), 8 seconds, visually educational.",
    context_chars=1500,
    temperature=0.85,
    failure_message="Failed to generate video content",
)

VIDEO_MAX_TOKENS = 300


def video_prompt(fmt: VideoFormat, topic: str, content: Optional[str]) -> str:
    context = content[: fmt.context_chars] if content else "Generate from the topic name"
    return (
        f'Create a {fmt.request_label} about "{topic}".\n\n'
        f"Context from article:\n{context}\n\n"
        f"{fmt.framing}"
    )


class MediaService:
    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def video_script(self, fmt: VideoFormat, topic: Optional[str], content: Optional[str]) -> dict[str, Any]:
        if not topic:
            raise missing_field("Topic is required", "topic")
        try:
            script = await self.llm.complete(
                fmt.system_prompt,
                video_prompt(fmt, topic, content),
                temperature=fmt.temperature,
                max_tokens=VIDEO_MAX_TOKENS,
            )
        except Exception as exc:
            logger.error("[VIDEO] %s prompt failed topic=%s: %s", fmt.name, topic, exc, exc_info=True)
            raise upstream_failure(fmt.failure_message) from exc

        if not script:
            raise upstream_failure("Failed to generate video prompt")

        logger.info("[VIDEO] %s topic=%s script=%r", fmt.name, topic, script[:100])
        return {"script": script, "videoUrl": None, "mode": "script"}
