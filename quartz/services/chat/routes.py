"""
Chat Routes

Endpoints:
- POST /api/chat - Answer a question about the article being read
- POST /api/related-questions - Five follow-up questions for a topic
- POST /api/suggest - Search-box concept suggestions
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from .service import ChatService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

# Service instance (initialized by main app)
_service: Optional[ChatService] = None


def initialize_service(service: ChatService) -> ChatService:
    global _service
    _service = service
    return _service


def get_service() -> ChatService:
    """Get chat service instance"""
    if _service is None:
        raise RuntimeError("Chat service not initialized")
    return _service


class ChatRequest(BaseModel):
    messages: Any = None
    topic: Optional[str] = None
    articleContent: Optional[str] = None


class RelatedQuestionsRequest(BaseModel):
    topic: Optional[str] = None
    content: Optional[str] = None


class SuggestRequest(BaseModel):
    query: Optional[str] = None


@router.post("/chat")
async def chat(body: ChatRequest) -> dict[str, str]:
    response = await get_service().reply(body.messages, body.topic, body.articleContent)
    return {"response": response}


@router.post("/related-questions")
async def related_questions(body: RelatedQuestionsRequest) -> dict[str, list[str]]:
    questions = await get_service().related_questions(body.topic, body.content)
    return {"questions": questions}


@router.post("/suggest")
async def suggest(body: SuggestRequest) -> dict[str, list[str]]:
    return {"suggestions": await get_service().suggest(body.query)}
