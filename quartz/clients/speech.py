"""Role-based speech synthesis over OpenAI TTS or ElevenLabs."""

import logging
from typing import Optional

from .elevenlabs import VOICES as ELEVENLABS_VOICES
from .elevenlabs import ElevenLabsClient
from .openai_client import LLMClient

logger = logging.getLogger(__name__)

OPENAI_VOICES = {
    "narrator": "nova",
    "host": "echo",
    "guest": "nova",
}


class SpeechSynthesizer:
    """Maps a speaking role to a provider voice and returns mp3 bytes."""

    def __init__(
        self,
        llm: LLMClient,
        provider: str = "openai",
        elevenlabs: Optional[ElevenLabsClient] = None,
    ):
        if provider == "elevenlabs" and elevenlabs is None:
            raise ValueError("TTS_PROVIDER=elevenlabs requires an ElevenLabs client")
        self.llm = llm
        self.provider = provider
        self.elevenlabs = elevenlabs

    def voice_for(self, role: str) -> str:
        voices = ELEVENLABS_VOICES if self.provider == "elevenlabs" else OPENAI_VOICES
        return voices.get(role, voices["narrator"])

    async def synthesize(self, text: str, role: str = "narrator") -> bytes:
        voice = self.voice_for(role)
        if self.provider == "elevenlabs":
            return await self.elevenlabs.text_to_speech(text, voice)
        return await self.llm.speech(text, voice=voice)
