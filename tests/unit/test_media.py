"""Tests for the video prompt endpoints' service."""
import pytest

from quartz.services.media.service import LANDSCAPE, PORTRAIT, MediaService, video_prompt
from shared.errors import APIException


@pytest.fixture
def service(llm) -> MediaService:
    return MediaService(llm)


@pytest.mark.unit
class TestVideoPrompt:
    def test_portrait_framing_and_context(self):
        prompt = video_prompt(PORTRAIT, "DNA", "y" * 2000)
        assert "portrait 9:16" in prompt
        assert "y" * 1000 in prompt and "y" * 1001 not in prompt

    def test_landscape_without_content(self):
        prompt = video_prompt(LANDSCAPE, "DNA", None)
        assert "landscape 16:9" in prompt
        assert "Generate from the topic name" in prompt


@pytest.mark.unit
class TestMediaService:
    @pytest.mark.asyncio
    async def test_script(self, service, llm):
        llm.reply = "Wide shot of a glowing double helix"
        result = await service.video_script(PORTRAIT, "DNA", None)

        assert result == {"script": "Wide shot of a glowing double helix", "videoUrl": None, "mode": "script"}
        assert llm.complete_calls[0]["temperature"] == 0.9

    @pytest.mark.asyncio
    async def test_topic_required(self, service):
        with pytest.raises(APIException) as exc_info:
            await service.video_script(LANDSCAPE, None, "content")
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "fmt, message",
        [(PORTRAIT, "Failed to generate TikTok content"), (LANDSCAPE, "Failed to generate video content")],
    )
    async def test_provider_error(self, service, llm, fmt, message):
        llm.error = RuntimeError("down")
        with pytest.raises(APIException) as exc_info:
            await service.video_script(fmt, "DNA", None)
        assert exc_info.value.error.message == message

    @pytest.mark.asyncio
    async def test_empty_script(self, service, llm):
        llm.reply = ""
        with pytest.raises(APIException) as exc_info:
            await service.video_script(LANDSCAPE, "DNA", None)
        assert exc_info.value.error.message == "Failed to generate video prompt"
