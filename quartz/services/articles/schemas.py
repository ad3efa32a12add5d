"""Request bodies for article endpoints."""

from typing import Any, Optional

from pydantic import BaseModel


class GenerateRequest(BaseModel):
    # Any so a non-string topic reaches the service and gets the 400 message
    topic: Any = None
    existingContent: Optional[str] = None


class PageMetadata(BaseModel):
    title: str
    description: str
    canonical: str
    openGraph: dict[str, Any]
    twitter: dict[str, Any]
