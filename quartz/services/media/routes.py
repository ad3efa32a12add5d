"""
Media Routes

Endpoints:
- POST /api/tiktokify - Portrait short-video prompt
- POST /api/videofy - Landscape explainer-video prompt
"""

from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from .service import LANDSCAPE, PORTRAIT, MediaService

router = APIRouter(prefix="/api", tags=["media"])

# Service instance (initialized by main app)
_service: Optional[MediaService] = None


def initialize_service(service: MediaService) -> MediaService:
    global _service
    _service = service
    return _service


def get_service() -> MediaService:
    """Get media service instance"""
    if _service is None:
        raise RuntimeError("Media service not initialized")
    return _service


class VideoRequest(BaseModel):
    topic: Optional[str] = None
    content: Optional[str] = None


@router.post("/tiktokify")
async def tiktokify(body: VideoRequest) -> dict[str, Any]:
    return await get_service().video_script(PORTRAIT, body.topic, body.content)


@router.post("/videofy")
async def videofy(body: VideoRequest) -> dict[str, Any]:
    return await get_service().video_script(LANDSCAPE, body.topic, body.content)
