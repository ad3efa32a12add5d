"""Narration and podcast audio."""

from .podcast import PodcastService
from .service import AudioService, Narration

__all__ = ["AudioService", "Narration", "PodcastService"]
