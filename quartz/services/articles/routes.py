"""
Article Routes

Endpoints:
- POST /api/generate - Stream an article (or its continuation) as server-sent events
- GET /api/page/{topic}/metadata - Title and share-card metadata for an article page
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from quartz.clients.supabase_client import AuthUser
from quartz.services.auth.dependencies import client_id, optional_user

from .schemas import GenerateRequest, PageMetadata
from .service import ArticleService
from .streaming import SSE_HEADERS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["articles"])

# Service instance (initialized by main app)
_service: Optional[ArticleService] = None


def initialize_service(service: ArticleService) -> ArticleService:
    global _service
    _service = service
    return _service


def get_service() -> ArticleService:
    """Get article service instance"""
    if _service is None:
        raise RuntimeError("Article service not initialized")
    return _service


@router.post("/generate")
async def generate(
    body: GenerateRequest,
    request: Request,
    user: Optional[AuthUser] = Depends(optional_user),
    caller: str = Depends(client_id),
) -> StreamingResponse:
    """
    Generate an encyclopedia article.

    Validation and usage-limit failures are returned as JSON (400 / 429)
    before the stream opens. After that every outcome is an SSE event:
    ``section`` per completed section, then ``done`` or ``error``.
    """
    service = get_service()
    plan = service.prepare(body.topic, body.existingContent, user, caller)
    return StreamingResponse(
        service.stream(plan, request.is_disconnected),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.get("/page/{topic}/metadata", response_model=PageMetadata)
async def page_metadata(topic: str) -> PageMetadata:
    return PageMetadata(**get_service().page_metadata(topic))
