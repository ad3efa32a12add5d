"""
Server-sent-event plumbing for streamed articles.

The model streams small text deltas; the browser wants whole sections so it
can render markdown without flicker. ``SectionAssembler`` buffers deltas and
releases the text in front of every ``## `` heading as soon as the heading
starts arriving, keeping the open section buffered until the next one.
"""

import json
import re
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any, Optional

from quartz.utils.text import remove_incomplete_concept, split_sections

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

HEADING_BOUNDARY_RE = re.compile(r"\n(## [^\n]+)")

DisconnectCheck = Callable[[], Awaitable[bool]]


def format_sse(event: str, payload: dict[str, Any]) -> str:
    """Format a Server-Sent Event. The event name is repeated as ``type`` in the data."""
    return f"event: {event}\ndata: {json.dumps({'type': event, **payload})}\n\n"


class SectionAssembler:
    """Accumulates deltas and splits them into completed sections."""

    def __init__(self) -> None:
        self.buffer = ""
        self.full_text = ""

    def feed(self, delta: str) -> list[str]:
        """Add a delta; return the sections it completed (possibly none)."""
        self.buffer += delta
        self.full_text += delta

        sections = []
        last_boundary = 0
        for match in HEADING_BOUNDARY_RE.finditer(self.buffer):
            chunk = self.buffer[last_boundary:match.start()]
            if chunk.strip():
                sections.append(chunk)
            last_boundary = match.start()

        if last_boundary > 0:
            self.buffer = self.buffer[last_boundary:]
        return sections

    def flush(self) -> Optional[str]:
        """Release whatever is still buffered."""
        remainder, self.buffer = self.buffer, ""
        return remainder if remainder.strip() else None

    @property
    def content(self) -> str:
        """Everything streamed so far, minus a dangling concept link."""
        return remove_incomplete_concept(self.full_text)


class SectionStream:
    """
    Relays model deltas as ``section`` events.

    After ``frames()`` is exhausted, ``cancelled`` tells whether the client
    went away mid-stream and ``content`` holds the cleaned text.
    """

    def __init__(self, deltas: AsyncIterator[str], is_disconnected: DisconnectCheck):
        self.deltas = deltas
        self.is_disconnected = is_disconnected
        self.assembler = SectionAssembler()
        self.cancelled = False

    async def frames(self) -> AsyncIterator[str]:
        async for delta in self.deltas:
            if await self.is_disconnected():
                self.cancelled = True
                break
            for section in self.assembler.feed(delta):
                yield format_sse("section", {"content": section})

        if self.cancelled:
            return

        remainder = self.assembler.flush()
        if remainder:
            yield format_sse("section", {"content": remainder})

    @property
    def content(self) -> str:
        return self.assembler.content


def replay_sections(content: str) -> list[str]:
    """Section events for content that is already complete (cache hits)."""
    return [format_sse("section", {"content": section}) for section in split_sections(content)]
