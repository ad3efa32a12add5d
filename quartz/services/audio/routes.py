"""
Audio Routes

Endpoints:
- POST /api/audify - Narrate an article as audio/mpeg
- POST /api/podcastify - Two-voice podcast script with combined audio
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter
from fastapi.responses import RedirectResponse, Response
from pydantic import BaseModel

from .podcast import PodcastService
from .service import AudioService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["audio"])

# Service instances (initialized by main app)
_service: Optional[AudioService] = None
_podcasts: Optional[PodcastService] = None


def initialize_service(service: AudioService, podcasts: PodcastService) -> AudioService:
    global _service, _podcasts
    _service = service
    _podcasts = podcasts
    return _service


def get_service() -> AudioService:
    """Get audio service instance"""
    if _service is None:
        raise RuntimeError("Audio service not initialized")
    return _service


def get_podcast_service() -> PodcastService:
    """Get podcast service instance"""
    if _podcasts is None:
        raise RuntimeError("Podcast service not initialized")
    return _podcasts


class AudifyRequest(BaseModel):
    topic: Optional[str] = None
    content: Optional[str] = None
    simplificationLevel: int = 0


class PodcastRequest(BaseModel):
    topic: Optional[str] = None
    content: Optional[str] = None


@router.post("/audify")
async def audify(body: AudifyRequest) -> Response:
    narration = await get_service().narrate(body.topic, body.content, body.simplificationLevel)
    if narration.cached:
        return RedirectResponse(url=narration.audio_url, status_code=302)

    headers = {"Content-Length": str(len(narration.audio))}
    if narration.audio_url:
        headers["X-Audio-Url"] = narration.audio_url
    return Response(content=narration.audio, media_type="audio/mpeg", headers=headers)


@router.post("/podcastify")
async def podcastify(body: PodcastRequest) -> dict[str, Any]:
    return await get_podcast_service().create(body.topic, body.content)
