"""Tests for reading-level simplification."""
import json

import pytest
from fakes import collect, never_disconnected

from quartz.services.simplify import SimplifyService
from quartz.services.simplify.service import LEVEL_PROMPTS, level_prompt, resolve_level
from shared.errors import APIException


@pytest.fixture
def service(llm, content_cache) -> SimplifyService:
    return SimplifyService(llm, content_cache)


def done_payload(frames: list[str]) -> dict:
    return json.loads(frames[-1].split("\n")[1][len("data: "):])


@pytest.mark.unit
class TestResolveLevel:
    @pytest.mark.parametrize(
        "target, expected",
        [
            (2, (2, "College")),
            ("High School", (3, "High School")),
            ("middle school", (4, "Middle School")),
            ("4", (4, "Middle School")),
            (5, (5, "Elementary")),
            (9, (5, "Elementary")),
            ("Kindergarten", (5, "Elementary")),
            (True, (5, "Elementary")),
        ],
    )
    def test_resolution(self, target, expected):
        assert resolve_level(target) == expected

    def test_unknown_name_prompt_is_elementary(self):
        assert level_prompt("Expert") == LEVEL_PROMPTS["Elementary"]
        assert "5-year-old" in level_prompt("Elementary")


@pytest.mark.unit
class TestSimplifyService:
    @pytest.mark.parametrize("content, level", [("", 3), (None, 3), ("text", None), ("text", "")])
    def test_content_and_level_required(self, service, content, level):
        with pytest.raises(APIException) as exc_info:
            service.prepare(content, "DNA", level)
        assert exc_info.value.status_code == 400
        assert exc_info.value.error.message == "Content and target level are required"

    @pytest.mark.asyncio
    async def test_streams_and_caches_by_level(self, service, llm, content_cache):
        llm.deltas = ["Simple intro", "\n## Parts\nTiny bits"]
        plan = service.prepare("Original article", "DNA", "High School")
        frames = await collect(service.stream(plan, never_disconnected))

        assert done_payload(frames) == {
            "type": "done",
            "content": "Simple intro\n## Parts\nTiny bits",
            "level": "High School",
        }
        call = llm.stream_calls[0]
        assert call["system"] == LEVEL_PROMPTS["High School"]
        assert 'about "DNA"' in call["user"] and "Original article" in call["user"]
        assert call["temperature"] == 0.8
        assert content_cache.get_simplification("DNA", 3) == "Simple intro\n## Parts\nTiny bits"

    @pytest.mark.asyncio
    async def test_cached_level_is_replayed(self, service, llm, content_cache):
        content_cache.cache_simplification("DNA", 5, "Easy\n## Fun\nyay")
        plan = service.prepare("Original", "DNA", 5)
        frames = await collect(service.stream(plan, never_disconnected))

        assert len(frames) == 3
        assert done_payload(frames)["cached"] is True
        assert llm.stream_calls == []

    @pytest.mark.asyncio
    async def test_without_topic_nothing_is_cached(self, service, llm, supabase):
        llm.deltas = ["plain"]
        plan = service.prepare("Original", None, 2)
        await collect(service.stream(plan, never_disconnected))

        assert 'about "this topic"' in llm.stream_calls[0]["user"]
        assert supabase.writes("quartz_simplifications") == []

    @pytest.mark.asyncio
    async def test_provider_error(self, service, llm):
        llm.stream_error = RuntimeError("boom")
        plan = service.prepare("Original", "DNA", 2)
        frames = await collect(service.stream(plan, never_disconnected))
        assert frames == ['event: error\ndata: {"type": "error", "message": "boom"}\n\n']

    @pytest.mark.asyncio
    async def test_blank_result_is_not_cached(self, service, llm, supabase):
        llm.deltas = [" "]
        plan = service.prepare("Original", "DNA", 2)
        await collect(service.stream(plan, never_disconnected))

        assert supabase.writes("quartz_simplifications") == []
        assert service.prepare("Original", "DNA", 2).cached_content is None
