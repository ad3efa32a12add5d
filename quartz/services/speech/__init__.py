"""Speech input: transcription, intent classification and activity detection."""

from .detector import SpeechActivityDetector
from .service import TranscriptionService, is_actionable, is_hallucination, parse_intent

__all__ = ["SpeechActivityDetector", "TranscriptionService", "is_actionable", "is_hallucination", "parse_intent"]
