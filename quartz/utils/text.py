"""
Text helpers shared by the article, audio and discovery services.

Generated articles are markdown with ``[[concept]]`` links, ``##``/``###``
headings and LaTeX math. Everything here works on that plain string form.
"""

import json
import re
import time
from typing import Any, Optional

MINOR_WORDS = frozenset(
    ["a", "an", "the", "and", "but", "or", "for", "nor", "on", "at", "to", "by", "in", "of"]
)

SECTION_SPLIT_RE = re.compile(r"(?=\n## )")
CONCEPT_RE = re.compile(r"\[\[([^\]]+)\]\]")
TRAILING_OPEN_BRACKETS_RE = re.compile(r"\[\[\Z")
UNCLOSED_CONCEPT_RE = re.compile(r"\[\[(?![^\]]*\]\])[^\[]*\Z")
_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def clean_topic(topic: str) -> str:
    """URL form to display form: ``Black_Holes`` -> ``Black Holes``."""
    return topic.replace("_", " ").strip()


def normalize_topic(topic: str) -> str:
    """Cache key form of a topic."""
    return topic.lower().strip()


def topic_slug(topic: str) -> str:
    """Display form to URL form: whitespace runs become underscores."""
    return re.sub(r"\s+", "_", topic)


def to_title_case(value: str) -> str:
    if not value:
        return value
    words = value.lower().split(" ")
    return " ".join(
        word[:1].upper() + word[1:] if index == 0 or word not in MINOR_WORDS else word
        for index, word in enumerate(words)
    )


def format_time_ago(timestamp_ms: float, now_ms: Optional[float] = None) -> str:
    """Relative time for a millisecond timestamp, e.g. ``5 minutes ago``."""
    if now_ms is None:
        now_ms = time.time() * 1000
    seconds = int((now_ms - timestamp_ms) // 1000)
    if seconds < 60:
        return "Just now"

    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes > 1 else ''} ago"

    hours = minutes // 60
    if hours < 24:
        return f"{hours} hour{'s' if hours > 1 else ''} ago"

    days = hours // 24
    return f"{days} day{'s' if days > 1 else ''} ago"


def split_sections(content: str) -> list[str]:
    """Split a finished article at ``## `` headings, dropping blank chunks."""
    return [section for section in SECTION_SPLIT_RE.split(content) if section.strip()]


def remove_incomplete_concept(content: str) -> str:
    """Drop a dangling ``[[`` or an unclosed ``[[text`` left by a truncated stream."""
    content = TRAILING_OPEN_BRACKETS_RE.sub("", content)
    return UNCLOSED_CONCEPT_RE.sub("", content)


def extract_concepts(content: str) -> list[str]:
    """Unique concept link targets in order of first appearance."""
    seen: dict[str, str] = {}
    for match in CONCEPT_RE.finditer(content):
        term = match.group(1).strip()
        if term and term.lower() not in seen:
            seen[term.lower()] = term
    return list(seen.values())


def strip_markdown_for_speech(text: str) -> str:
    text = CONCEPT_RE.sub(r"\1", text)
    text = re.sub(r"#{1,6}\s*", "", text)
    text = re.sub(r"\*\*([^*]+)\*\*", r"\1", text)
    text = re.sub(r"\*([^*]+)\*", r"\1", text)
    text = re.sub(r"`([^`]+)`", r"\1", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def heading_slug(text: str) -> str:
    """Anchor id for a heading: lowercase, non-alphanumeric runs become ``-``."""
    return _NON_ALNUM_RE.sub("-", text.lower())


def table_of_contents(content: str) -> list[dict[str, Any]]:
    """
    Build the ``##`` / ``###`` outline of an article.

    Returns a list of ``{"id", "text", "subsections": [{"id", "text", "level"}]}``.
    ``###`` headings before the first ``##`` have no parent and are dropped.
    """
    sections: list[dict[str, Any]] = []
    current: Optional[dict[str, Any]] = None

    for line in content.split("\n"):
        stripped = line.strip()
        h2 = re.match(r"^##\s+(.+)$", stripped)
        h3 = re.match(r"^###\s+(.+)$", stripped)
        if h2:
            text = re.sub(r"\[\[|\]\]|\*", "", h2.group(1))
            current = {"id": heading_slug(text), "text": text, "subsections": []}
            sections.append(current)
        elif h3 and current is not None:
            text = re.sub(r"\[\[|\]\]|\*", "", h3.group(1))
            current["subsections"].append({"id": heading_slug(text), "text": text, "level": 3})

    return sections


def extract_json_object(text: str) -> Optional[dict[str, Any]]:
    """Parse the outermost ``{...}`` span of a model reply, or None."""
    match = _JSON_OBJECT_RE.search(text or "")
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def extract_json_array(text: str) -> Optional[list[Any]]:
    """Parse the outermost ``[...]`` span of a model reply, or None."""
    match = _JSON_ARRAY_RE.search(text or "")
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, list) else None
