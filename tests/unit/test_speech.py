"""Tests for speech-activity detection and voice transcription."""
import pytest

from quartz.services.speech.detector import SpeechActivityDetector, average_level
from quartz.services.speech.service import (
    TranscriptionService,
    is_actionable,
    is_hallucination,
    parse_intent,
)
from shared.errors import APIException

LOUD = [128] * 16
QUIET = [0] * 16
AUDIO = b"\x1aE\xdf\xa3" + b"\x00" * 4000


@pytest.mark.unit
class TestSpeechActivityDetector:
    def test_average_level(self):
        assert average_level([255, 255]) == 1.0
        assert average_level([]) == 0.0

    def test_submits_after_silence(self):
        detector = SpeechActivityDetector()
        assert not detector.process(LOUD, 0)
        assert not detector.process(QUIET, 500)
        assert not detector.process(QUIET, 1600)
        assert detector.process(QUIET, 1700)

    def test_silence_without_speech(self):
        detector = SpeechActivityDetector()
        assert not any(detector.process(QUIET, t) for t in range(0, 5000, 100))

    def test_speech_resets_silence(self):
        detector = SpeechActivityDetector()
        detector.process(LOUD, 0)
        detector.process(QUIET, 500)
        detector.process(LOUD, 1000)
        detector.process(QUIET, 1500)
        assert not detector.process(QUIET, 2600)
        assert detector.process(QUIET, 2700)

    def test_minimum_speech_duration(self):
        detector = SpeechActivityDetector(min_speech_duration_ms=2000)
        detector.process(LOUD, 0)
        detector.process(QUIET, 100)
        assert not detector.process(QUIET, 1300)
        assert detector.process(QUIET, 2000)

    def test_no_submit_while_processing(self):
        detector = SpeechActivityDetector()
        detector.process(LOUD, 0)
        detector.process(QUIET, 100)
        detector.begin_processing()
        assert not detector.process(QUIET, 2000)
        detector.reset()
        assert not detector.process(QUIET, 4000)


@pytest.mark.unit
class TestIntent:
    @pytest.mark.parametrize("text", ["Thank you.", "  bye ", "You", "like and subscribe"])
    def test_hallucinations(self, text):
        assert is_hallucination(text)

    def test_real_speech_is_not_hallucination(self):
        assert not is_hallucination("Thank you for explaining black holes")

    def test_parse_intent(self):
        assert parse_intent('{"type":"topic","content":"Black Holes"}') == {"type": "topic", "content": "Black Holes"}
        assert parse_intent('{"type":"shout","content":"x"}') == {"type": "ignore", "content": ""}
        assert parse_intent("not json") == {"type": "ignore", "content": ""}

    def test_actionable(self):
        assert is_actionable({"type": "question", "content": "Why is the sky blue?"})
        assert not is_actionable({"type": "topic", "content": "ok"})
        assert not is_actionable({"type": "ignore", "content": "Something long"})


@pytest.mark.unit
class TestTranscriptionService:
    @pytest.fixture
    def service(self, llm) -> TranscriptionService:
        return TranscriptionService(llm)

    @pytest.mark.asyncio
    async def test_audio_required(self, service):
        with pytest.raises(APIException) as exc_info:
            await service.transcribe(None, None, None)
        assert exc_info.value.error.message == "Audio file is required"

    @pytest.mark.asyncio
    async def test_short_blob_rejected(self, service, llm):
        with pytest.raises(APIException) as exc_info:
            await service.transcribe("a.webm", b"tiny", "audio/webm")
        assert exc_info.value.status_code == 400
        assert exc_info.value.error.message == "Audio too short"
        assert llm.transcribe_calls == []

    @pytest.mark.asyncio
    async def test_question_is_classified(self, service, llm):
        llm.transcript = "What is a quasar?"
        llm.reply = '{"type":"question","content":"What is a quasar?"}'
        result = await service.transcribe(None, AUDIO, None)

        assert result == {"transcript": "What is a quasar?", "type": "question", "content": "What is a quasar?"}
        assert llm.transcribe_calls[0][0] == "audio.webm"
        assert llm.complete_calls[0]["temperature"] == 0.1

    @pytest.mark.asyncio
    async def test_hallucination_skips_classifier(self, service, llm):
        llm.transcript = "Thanks for watching."
        result = await service.transcribe("a.webm", AUDIO, "audio/webm")
        assert result["type"] == "ignore"
        assert llm.complete_calls == []

    @pytest.mark.asyncio
    async def test_no_speech(self, service, llm):
        llm.transcript = ""
        with pytest.raises(APIException) as exc_info:
            await service.transcribe("a.webm", AUDIO, "audio/webm")
        assert exc_info.value.status_code == 400
        assert exc_info.value.error.message == "No speech detected"

    @pytest.mark.asyncio
    async def test_whisper_failure(self, service, llm):
        llm.error = RuntimeError("whisper down")
        with pytest.raises(APIException) as exc_info:
            await service.transcribe("a.webm", AUDIO, "audio/webm")
        assert exc_info.value.status_code == 500
        assert exc_info.value.error.message == "Failed to transcribe audio"
