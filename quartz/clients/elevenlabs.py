"""
ElevenLabs text-to-speech client.

Voice ids come from the ElevenLabs voice library: a calm narrator for
articles, and two conversational voices for the podcast host and guest.
"""

import logging
from typing import Any, Optional

import httpx

from shared.logging.safe_logging import token_presence

logger = logging.getLogger(__name__)

VOICES = {
    "narrator": "21m00Tcm4TlvDq8ikWAM",  # Rachel
    "host": "ErXwobaYiN019PkySvjV",  # Antoni
    "guest": "MF3mGyEYCl7XYWbV9V6O",  # Elli
}

MODELS = {
    "turbo": "eleven_turbo_v2_5",
    "multilingual": "eleven_multilingual_v2",
}


class ElevenLabsClient:
    """Async client for the ElevenLabs ``/text-to-speech`` endpoints."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.elevenlabs.io/v1",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        logger.info("ElevenLabs client ready %s", token_presence("api_key", api_key))

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    def _request(
        self, text: str, model_id: str, stability: float, similarity_boost: float
    ) -> tuple[dict[str, str], dict[str, Any]]:
        if not self.api_key:
            raise RuntimeError("ELEVENLABS_API_KEY is not configured")
        headers = {"Content-Type": "application/json", "xi-api-key": self.api_key}
        body = {
            "text": text,
            "model_id": model_id,
            "voice_settings": {"stability": stability, "similarity_boost": similarity_boost},
        }
        return headers, body

    async def text_to_speech(
        self,
        text: str,
        voice_id: str,
        model_id: str = MODELS["turbo"],
        stability: float = 0.5,
        similarity_boost: float = 0.75,
    ) -> bytes:
        """Synthesize the whole clip and return mp3 bytes."""
        headers, body = self._request(text, model_id, stability, similarity_boost)
        client = await self._get_client()
        response = await client.post(f"/text-to-speech/{voice_id}", headers=headers, json=body)
        if response.status_code >= 400:
            raise RuntimeError(f"ElevenLabs API error: {response.status_code} - {response.text}")
        return response.content

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
