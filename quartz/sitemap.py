"""
Sitemap Routes

Endpoints:
- GET /sitemap.xml - Home page plus the popular topic pages
"""

from datetime import UTC, datetime
from typing import Optional
from xml.sax.saxutils import escape

from fastapi import APIRouter
from fastapi.responses import Response

router = APIRouter(tags=["sitemap"])

POPULAR_TOPICS = [
    "Quantum_Mechanics",
    "Artificial_Intelligence",
    "Machine_Learning",
    "Neural_Networks",
    "Black_Holes",
    "Theory_of_Relativity",
    "Climate_Change",
    "Photosynthesis",
    "DNA",
    "Evolution",
    "Blockchain",
    "Cryptocurrency",
    "Philosophy",
    "Psychology",
    "Economics",
    "World_War_II",
    "Renaissance",
    "Ancient_Rome",
    "Computer_Science",
    "Mathematics",
]

_site_url = "https://tryquartz.wiki"


def initialize_service(site_url: str) -> str:
    global _site_url
    _site_url = site_url.rstrip("/")
    return _site_url


def sitemap_entries(base_url: str, now: Optional[datetime] = None) -> list[dict[str, str]]:
    modified = (now or datetime.now(UTC)).date().isoformat()
    entries = [{"loc": base_url, "lastmod": modified, "changefreq": "daily", "priority": "1.0"}]
    entries.extend(
        {"loc": f"{base_url}/page/{topic}", "lastmod": modified, "changefreq": "weekly", "priority": "0.8"}
        for topic in POPULAR_TOPICS
    )
    return entries


def render_sitemap(entries: list[dict[str, str]]) -> str:
    urls = "".join(
        "<url>" + "".join(f"<{tag}>{escape(value)}</{tag}>" for tag, value in entry.items()) + "</url>"
        for entry in entries
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
        f"{urls}</urlset>"
    )


@router.get("/sitemap.xml")
async def sitemap() -> Response:
    return Response(content=render_sitemap(sitemap_entries(_site_url)), media_type="application/xml")
