"""
OpenAI client wrapper.

One entry point per call shape (one-shot completion, streamed text, speech,
transcription) so services never branch on which OpenAI API the active
model needs. ``gpt-5.2`` goes through the Responses API with reasoning
effort; ``gpt-4-turbo`` goes through Chat Completions.
"""

import logging
import time
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any, Optional

from openai import AsyncOpenAI

from shared.logging.safe_logging import token_presence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelOption:
    model: str
    use_responses_api: bool
    supports_temperature: bool = True
    supports_reasoning: bool = False


MODEL_OPTIONS: dict[str, ModelOption] = {
    "gpt-4-turbo": ModelOption("gpt-4-turbo", use_responses_api=False),
    "gpt-5.2": ModelOption("gpt-5.2", use_responses_api=True, supports_reasoning=True),
}

TTS_MODEL = "tts-1"
STT_MODEL = "whisper-1"


def resolve_model(model_key: str) -> ModelOption:
    """Look up a model option; unknown keys are sent to the Responses API as-is."""
    return MODEL_OPTIONS.get(model_key) or ModelOption(model_key, use_responses_api=True)


class LLMClient:
    """Async wrapper around ``openai.AsyncOpenAI`` bound to one model."""

    def __init__(
        self,
        api_key: str,
        model_key: str = "gpt-5.2",
        reasoning_effort: str = "none",
        timeout: float = 60.0,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.option = resolve_model(model_key)
        self.reasoning_effort = reasoning_effort
        self._client = client or AsyncOpenAI(api_key=api_key or None, timeout=timeout)
        logger.info(
            "LLM client ready model=%s responses_api=%s %s",
            self.option.model,
            self.option.use_responses_api,
            token_presence("api_key", api_key),
        )

    @property
    def model(self) -> str:
        return self.option.model

    def _input(
        self, system: str, user: Optional[str], messages: Optional[list[dict[str, str]]]
    ) -> list[dict[str, str]]:
        turns = messages if messages is not None else [{"role": "user", "content": user or ""}]
        return [{"role": "system", "content": system}, *turns]

    def _responses_kwargs(self, temperature: float, max_tokens: int) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"model": self.option.model, "max_output_tokens": max_tokens}
        if self.option.supports_reasoning:
            kwargs["reasoning"] = {"effort": self.reasoning_effort}
        if self.option.supports_temperature:
            kwargs["temperature"] = temperature
        return kwargs

    async def complete(
        self,
        system: str,
        user: Optional[str] = None,
        *,
        messages: Optional[list[dict[str, str]]] = None,
        temperature: float = 0.7,
        max_tokens: int = 2500,
    ) -> str:
        """Run one completion and return its text ("" when the model returned nothing)."""
        started = time.perf_counter()
        turns = self._input(system, user, messages)

        if self.option.use_responses_api:
            response = await self._client.responses.create(
                input=turns, **self._responses_kwargs(temperature, max_tokens)
            )
            output = response.output_text or ""
        else:
            response = await self._client.chat.completions.create(
                model=self.option.model,
                messages=turns,
                temperature=temperature,
                max_tokens=max_tokens,
            )
            output = (response.choices[0].message.content if response.choices else None) or ""

        logger.debug(
            "[LLM] complete model=%s chars=%d elapsed_ms=%d",
            self.option.model,
            len(output),
            (time.perf_counter() - started) * 1000,
        )
        return output

    async def stream(
        self,
        system: str,
        user: str,
        *,
        temperature: float = 0.7,
        max_tokens: int = 4000,
    ) -> AsyncIterator[str]:
        """Yield text deltas as the model produces them."""
        turns = self._input(system, user, None)

        if self.option.use_responses_api:
            events = await self._client.responses.create(
                input=turns, stream=True, **self._responses_kwargs(temperature, max_tokens)
            )
            async for event in events:
                if event.type == "response.output_text.delta" and event.delta:
                    yield event.delta
        else:
            chunks = await self._client.chat.completions.create(
                model=self.option.model,
                messages=turns,
                temperature=temperature,
                max_tokens=max_tokens,
                stream=True,
            )
            async for chunk in chunks:
                if chunk.choices and chunk.choices[0].delta.content:
                    yield chunk.choices[0].delta.content

    async def speech(self, text: str, voice: str = "nova", model: str = TTS_MODEL) -> bytes:
        """Synthesize mp3 audio."""
        response = await self._client.audio.speech.create(
            model=model,
            voice=voice,
            input=text,
            response_format="mp3",
        )
        return response.content

    async def transcribe(self, filename: str, data: bytes, content_type: str) -> str:
        """Transcribe English speech with Whisper."""
        transcription = await self._client.audio.transcriptions.create(
            file=(filename, data, content_type),
            model=STT_MODEL,
            language="en",
        )
        return (transcription.text or "").strip()

    async def close(self) -> None:
        await self._client.close()
