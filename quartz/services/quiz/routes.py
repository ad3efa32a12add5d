"""
Quiz Routes

Endpoints:
- POST /api/gamify - Next page of quiz questions for a topic
"""

import logging
from typing import Optional

from fastapi import APIRouter

from .schemas import GamifyRequest, GamifyResponse
from .service import QuizService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["quiz"])

# Service instance (initialized by main app)
_service: Optional[QuizService] = None


def initialize_service(service: QuizService) -> QuizService:
    global _service
    _service = service
    return _service


def get_service() -> QuizService:
    """Get quiz service instance"""
    if _service is None:
        raise RuntimeError("Quiz service not initialized")
    return _service


@router.post("/gamify", response_model=GamifyResponse, response_model_exclude_none=True)
async def gamify(body: GamifyRequest) -> GamifyResponse:
    result = await get_service().questions(body.topic, body.content, body.startIndex)
    return GamifyResponse(**result)
