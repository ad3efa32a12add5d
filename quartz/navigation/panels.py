"""
Panel stack: the breadcrumb trail of articles opened by following concept
links. Only the last two panels are on screen at a time.
"""

from dataclasses import dataclass, field
from typing import Optional

from quartz.services.simplify.service import MAX_LEVEL, SIMPLIFICATION_LEVELS
from quartz.utils.text import clean_topic, topic_slug

from .client_cache import RecentTopics

VISIBLE_PANELS = 2


@dataclass
class PanelState:
    topic: str  # URL form, e.g. "Black_Holes"
    label: str
    content: str = ""
    simplified_contents: dict[int, str] = field(default_factory=dict)
    simplify_level: int = 1

    @property
    def display_content(self) -> str:
        return self.simplified_contents.get(self.simplify_level) or self.content


class PanelStack:
    def __init__(self, root_topic: str, recent: Optional[RecentTopics] = None):
        self.recent = recent
        self.panels: list[PanelState] = [PanelState(topic=root_topic, label=clean_topic(root_topic))]

    def __len__(self) -> int:
        return len(self.panels)

    @property
    def active(self) -> PanelState:
        return self.panels[-1]

    @property
    def visible(self) -> list[PanelState]:
        return self.panels[-VISIBLE_PANELS:]

    @property
    def breadcrumbs(self) -> list[str]:
        return [panel.label for panel in self.panels]

    def open_concept(self, concept: str) -> PanelState:
        panel = PanelState(topic=topic_slug(concept), label=concept)
        self.panels.append(panel)
        if self.recent is not None:
            self.recent.add(concept)
        return panel

    def navigate(self, index: int) -> None:
        """Breadcrumb click: keep everything up to and including ``index``."""
        self.panels = self.panels[: max(index + 1, 1)]

    def close(self, index: int) -> None:
        """Close the panel at ``index`` and everything opened after it.

        The root panel stays open.
        """
        self.panels = self.panels[: max(index, 1)]

    def set_simplify_level(self, level: int, content: str) -> None:
        panel = self.active
        panel.simplify_level = level
        panel.simplified_contents[level] = content

    def next_simplify_request(self) -> Optional[tuple[int, str, str]]:
        """
        What to send to ``/api/simplify`` for one more level of simplification.

        Returns ``(next_level, source_content, level_name)``, or None when the
        panel is already at the simplest level or the next level was
        simplified before (in which case it is applied directly).
        """
        panel = self.active
        if panel.simplify_level >= MAX_LEVEL:
            return None
        next_level = panel.simplify_level + 1
        if next_level in panel.simplified_contents:
            panel.simplify_level = next_level
            return None
        return next_level, panel.display_content, SIMPLIFICATION_LEVELS[next_level]
