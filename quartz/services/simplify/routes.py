"""
Simplify Routes

Endpoints:
- POST /api/simplify - Stream an article rewritten for a reading level
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from quartz.services.articles.streaming import SSE_HEADERS

from .service import SimplifyService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["simplify"])

# Service instance (initialized by main app)
_service: Optional[SimplifyService] = None


def initialize_service(service: SimplifyService) -> SimplifyService:
    global _service
    _service = service
    return _service


def get_service() -> SimplifyService:
    """Get simplify service instance"""
    if _service is None:
        raise RuntimeError("Simplify service not initialized")
    return _service


class SimplifyRequest(BaseModel):
    content: Optional[str] = None
    topic: Optional[str] = None
    targetLevel: Any = None  # level name ("High School") or number (3)


@router.post("/simplify")
async def simplify(body: SimplifyRequest, request: Request) -> StreamingResponse:
    service = get_service()
    plan = service.prepare(body.content, body.topic, body.targetLevel)
    return StreamingResponse(
        service.stream(plan, request.is_disconnected),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
