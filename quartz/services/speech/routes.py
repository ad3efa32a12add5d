"""
Speech Routes

Endpoints:
- POST /api/transcribe - Transcribe a recorded phrase and classify its intent
"""

import logging
from typing import Optional

from fastapi import APIRouter, File, UploadFile

from .service import TranscriptionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["speech"])

# Service instance (initialized by main app)
_service: Optional[TranscriptionService] = None


def initialize_service(service: TranscriptionService) -> TranscriptionService:
    global _service
    _service = service
    return _service


def get_service() -> TranscriptionService:
    """Get transcription service instance"""
    if _service is None:
        raise RuntimeError("Transcription service not initialized")
    return _service


@router.post("/transcribe")
async def transcribe(audio: Optional[UploadFile] = File(default=None)) -> dict[str, str]:
    """Multipart upload with the recording in the ``audio`` field."""
    if audio is None:
        return await get_service().transcribe(None, None, None)
    data = await audio.read()
    return await get_service().transcribe(audio.filename, data, audio.content_type)
