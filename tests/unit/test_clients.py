"""Tests for the provider client wrappers."""
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fakes import FakeSupabase

from quartz.clients.elevenlabs import VOICES, ElevenLabsClient
from quartz.clients.openai_client import LLMClient, resolve_model
from quartz.clients.speech import SpeechSynthesizer
from quartz.clients.supabase_client import (
    AuthService,
    AuthSession,
    AuthUser,
    bearer_token,
    create_session_client_factory,
)


def openai_mock() -> MagicMock:
    client = MagicMock()
    client.responses.create = AsyncMock()
    client.chat.completions.create = AsyncMock()
    client.audio.speech.create = AsyncMock()
    client.audio.transcriptions.create = AsyncMock()
    client.close = AsyncMock()
    return client


async def event_stream(events):
    for event in events:
        yield event


@pytest.mark.unit
class TestLLMClient:
    """Request shapes for both OpenAI APIs."""

    def test_unknown_model_uses_responses_api(self):
        option = resolve_model("gpt-6")
        assert option.model == "gpt-6"
        assert option.use_responses_api

    @pytest.mark.asyncio
    async def test_responses_completion(self):
        client = openai_mock()
        client.responses.create.return_value = SimpleNamespace(output_text="Hello")
        llm = LLMClient("sk-test", "gpt-5.2", reasoning_effort="low", client=client)

        assert await llm.complete("sys", "hi", temperature=0.3, max_tokens=50) == "Hello"
        kwargs = client.responses.create.call_args.kwargs
        assert kwargs["input"] == [{"role": "system", "content": "sys"}, {"role": "user", "content": "hi"}]
        assert kwargs["reasoning"] == {"effort": "low"}
        assert kwargs["max_output_tokens"] == 50
        assert kwargs["temperature"] == 0.3

    @pytest.mark.asyncio
    async def test_chat_completion_with_history(self):
        client = openai_mock()
        message = SimpleNamespace(content="Sure")
        client.chat.completions.create.return_value = SimpleNamespace(choices=[SimpleNamespace(message=message)])
        llm = LLMClient("sk-test", "gpt-4-turbo", client=client)

        history = [{"role": "user", "content": "a"}, {"role": "assistant", "content": "b"}]
        assert await llm.complete("sys", messages=history) == "Sure"
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4-turbo"
        assert kwargs["messages"][1:] == history

    @pytest.mark.asyncio
    async def test_empty_completion(self):
        client = openai_mock()
        client.chat.completions.create.return_value = SimpleNamespace(choices=[])
        assert await LLMClient("k", "gpt-4-turbo", client=client).complete("s", "u") == ""

    @pytest.mark.asyncio
    async def test_responses_stream_keeps_text_deltas(self):
        client = openai_mock()
        client.responses.create.return_value = event_stream(
            [
                SimpleNamespace(type="response.created", delta=None),
                SimpleNamespace(type="response.output_text.delta", delta="Hel"),
                SimpleNamespace(type="response.output_text.delta", delta="lo"),
                SimpleNamespace(type="response.completed", delta=None),
            ]
        )
        llm = LLMClient("k", "gpt-5.2", client=client)

        assert [d async for d in llm.stream("s", "u")] == ["Hel", "lo"]
        assert client.responses.create.call_args.kwargs["stream"] is True

    @pytest.mark.asyncio
    async def test_chat_stream(self):
        client = openai_mock()

        def chunk(text):
            return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=text))])

        client.chat.completions.create.return_value = event_stream([chunk("a"), chunk(None), chunk("b")])
        llm = LLMClient("k", "gpt-4-turbo", client=client)
        assert [d async for d in llm.stream("s", "u")] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_speech_and_transcription(self):
        client = openai_mock()
        client.audio.speech.create.return_value = SimpleNamespace(content=b"mp3")
        client.audio.transcriptions.create.return_value = SimpleNamespace(text="  hello there ")
        llm = LLMClient("k", client=client)

        assert await llm.speech("Hi", voice="echo") == b"mp3"
        assert client.audio.speech.create.call_args.kwargs["voice"] == "echo"
        assert await llm.transcribe("a.webm", b"data", "audio/webm") == "hello there"
        kwargs = client.audio.transcriptions.create.call_args.kwargs
        assert kwargs["file"] == ("a.webm", b"data", "audio/webm")
        assert kwargs["language"] == "en"


@pytest.mark.unit
class TestElevenLabsClient:
    @pytest.mark.asyncio
    async def test_text_to_speech(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["key"] = request.headers["xi-api-key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, content=b"ID3")

        client = ElevenLabsClient("el-key", transport=httpx.MockTransport(handler))
        audio = await client.text_to_speech("Hello", VOICES["host"])
        await client.close()

        assert audio == b"ID3"
        assert seen["path"] == f"/v1/text-to-speech/{VOICES['host']}"
        assert seen["key"] == "el-key"
        assert seen["body"]["model_id"] == "eleven_turbo_v2_5"
        assert seen["body"]["voice_settings"] == {"stability": 0.5, "similarity_boost": 0.75}

    @pytest.mark.asyncio
    async def test_api_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(401, text="bad key"))
        client = ElevenLabsClient("el-key", transport=transport)
        with pytest.raises(RuntimeError, match="401"):
            await client.text_to_speech("Hello", VOICES["narrator"])
        await client.close()

    @pytest.mark.asyncio
    async def test_missing_key(self):
        with pytest.raises(RuntimeError, match="ELEVENLABS_API_KEY"):
            await ElevenLabsClient("").text_to_speech("Hello", VOICES["narrator"])


@pytest.mark.unit
class TestSpeechSynthesizer:
    def test_elevenlabs_requires_client(self, llm):
        with pytest.raises(ValueError):
            SpeechSynthesizer(llm, provider="elevenlabs")

    def test_openai_voices(self, llm):
        speech = SpeechSynthesizer(llm)
        assert speech.voice_for("host") == "echo"
        assert speech.voice_for("unknown") == "nova"

    @pytest.mark.asyncio
    async def test_elevenlabs_route(self, llm):
        elevenlabs = MagicMock(spec=ElevenLabsClient)
        elevenlabs.text_to_speech = AsyncMock(return_value=b"el")
        speech = SpeechSynthesizer(llm, provider="elevenlabs", elevenlabs=elevenlabs)

        assert await speech.synthesize("Hi", role="guest") == b"el"
        elevenlabs.text_to_speech.assert_awaited_once_with("Hi", VOICES["guest"])
        assert llm.speech_calls == []


@pytest.mark.unit
class TestSupabaseAuth:
    @pytest.mark.parametrize(
        "header, expected",
        [("Bearer abc", "abc"), ("bearer  abc ", "abc"), ("Basic abc", None), ("Bearer ", None), (None, None)],
    )
    def test_bearer_token(self, header, expected):
        assert bearer_token(header) == expected

    def test_get_user(self, supabase):
        supabase.add_user("tok", "u1", "reader@example.com")
        auth = AuthService(supabase)
        assert auth.get_user("tok") == AuthUser(id="u1", email="reader@example.com")
        assert auth.get_user("other") is None
        assert auth.get_user(None) is None

    def test_exchange_code_uses_a_one_off_client(self, supabase):
        session_clients = []

        def factory():
            session_clients.append(FakeSupabase(key="anon"))
            return session_clients[-1]

        auth = AuthService(supabase, factory)
        session = auth.exchange_code("good", code_verifier="verifier-1")

        assert session == AuthSession(access_token="user-jwt-good", refresh_token="refresh-1", expires_in=3600)
        assert session_clients[0].auth.exchanged == [{"auth_code": "good", "code_verifier": "verifier-1"}]
        assert supabase.headers["Authorization"] == "Bearer service-role"
        assert supabase.auth.exchanged == []

    def test_exchange_code_failures(self, supabase):
        auth = AuthService(supabase, lambda: FakeSupabase(key="anon"))
        assert auth.exchange_code("bad") is None
        assert AuthService(supabase).exchange_code("good") is None

    def test_session_client_factory_requires_configuration(self, settings):
        assert create_session_client_factory(settings.model_copy(update={"SUPABASE_URL": ""})) is None
