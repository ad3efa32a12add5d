"""
Speech-activity detection for hands-free input.

Fed with frames of microphone frequency levels (0-255 per bin), the detector
decides when the speaker has finished a phrase: speech was heard, at least
``SILENCE_DURATION`` ms of silence followed, and the phrase began at least
``MIN_SPEECH_DURATION`` ms ago.
"""

from collections.abc import Sequence
from typing import Optional

SILENCE_THRESHOLD = 0.01  # mean level, normalised to 0-1
SILENCE_DURATION = 1200  # ms
MIN_SPEECH_DURATION = 600  # ms
MIN_BLOB_SIZE = 3000  # bytes; smaller recordings are not worth transcribing


def average_level(levels: Sequence[int]) -> float:
    if not levels:
        return 0.0
    return sum(levels) / len(levels) / 255


class SpeechActivityDetector:
    def __init__(
        self,
        silence_threshold: float = SILENCE_THRESHOLD,
        silence_duration_ms: int = SILENCE_DURATION,
        min_speech_duration_ms: int = MIN_SPEECH_DURATION,
    ):
        self.silence_threshold = silence_threshold
        self.silence_duration_ms = silence_duration_ms
        self.min_speech_duration_ms = min_speech_duration_ms
        self.processing = False
        self.has_speech = False
        self.speech_start: Optional[float] = None
        self.silence_start: Optional[float] = None

    def process(self, levels: Sequence[int], now_ms: float) -> bool:
        """Consume one frame; True when the current segment should be submitted."""
        if average_level(levels) > self.silence_threshold:
            if not self.has_speech:
                self.has_speech = True
                self.speech_start = now_ms
            self.silence_start = None
            return False

        if self.has_speech and self.silence_start is None:
            self.silence_start = now_ms

        return (
            self.has_speech
            and self.silence_start is not None
            and self.speech_start is not None
            and now_ms - self.silence_start >= self.silence_duration_ms
            and now_ms - self.speech_start >= self.min_speech_duration_ms
            and not self.processing
        )

    def begin_processing(self) -> None:
        self.processing = True

    def reset(self) -> None:
        """Forget the finished segment and accept new speech."""
        self.processing = False
        self.has_speech = False
        self.speech_start = None
        self.silence_start = None
