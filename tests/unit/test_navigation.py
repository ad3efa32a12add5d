"""Tests for the panel stack, client caches and the sitemap."""
import json
from datetime import UTC, datetime

import pytest

from quartz.navigation import PanelStack
from quartz.navigation.client_cache import (
    MAX_RECENT_TOPICS,
    ClientCache,
    RecentTopics,
    cache_key,
)
from quartz.sitemap import POPULAR_TOPICS, render_sitemap, sitemap_entries


@pytest.mark.unit
class TestPanelStack:
    """Breadcrumb navigation between concept panels."""

    def test_root_panel(self):
        stack = PanelStack("Black_Holes")
        assert stack.active.label == "Black Holes"
        assert stack.breadcrumbs == ["Black Holes"]

    def test_open_concept_records_recent(self):
        recent = RecentTopics(clock=lambda: 1)
        stack = PanelStack("Black_Holes", recent=recent)
        panel = stack.open_concept("Event Horizon")

        assert panel.topic == "Event_Horizon"
        assert recent.latest()[0]["name"] == "Event Horizon"

    def test_only_last_two_visible(self):
        stack = PanelStack("A")
        stack.open_concept("B")
        stack.open_concept("C")
        assert [p.label for p in stack.visible] == ["B", "C"]
        assert len(stack) == 3

    def test_navigate_and_close(self):
        stack = PanelStack("A")
        for concept in ("B", "C", "D"):
            stack.open_concept(concept)
        stack.navigate(2)
        assert stack.breadcrumbs == ["A", "B", "C"]
        stack.close(1)
        assert stack.breadcrumbs == ["A"]

    def test_root_panel_cannot_be_closed(self):
        stack = PanelStack("A")
        stack.open_concept("B")
        stack.close(0)
        assert stack.breadcrumbs == ["A"]
        stack.navigate(-1)
        assert stack.active.label == "A"
        assert stack.next_simplify_request() == (2, "", "College")

    def test_simplify_progression(self):
        stack = PanelStack("A")
        stack.active.content = "Expert text"

        assert stack.next_simplify_request() == (2, "Expert text", "College")
        stack.set_simplify_level(2, "College text")
        assert stack.active.display_content == "College text"
        assert stack.next_simplify_request() == (3, "College text", "High School")

    def test_cached_level_is_applied(self):
        stack = PanelStack("A")
        stack.active.simplified_contents[2] = "College text"
        assert stack.next_simplify_request() is None
        assert stack.active.simplify_level == 2

    def test_simplest_level_stops(self):
        stack = PanelStack("A")
        stack.set_simplify_level(5, "Tiny words")
        assert stack.next_simplify_request() is None


@pytest.mark.unit
class TestClientCache:
    def test_key_format(self):
        assert cache_key("Black  Holes") == "wikia_v1_black_holes"

    def test_save_and_simplified(self):
        cache = ClientCache({}, clock=lambda: 5)
        cache.save("DNA", "text")
        cache.save_simplified("DNA", "easy")
        assert cache.get("dna") == {"content": "text", "timestamp": 5, "topic": "DNA", "simplifiedContent": "easy"}

    def test_simplified_without_article_is_ignored(self):
        store = {}
        ClientCache(store).save_simplified("DNA", "easy")
        assert store == {}

    def test_corrupt_entry(self):
        assert ClientCache({"wikia_v1_dna": "{oops"}).get("DNA") is None

    def test_prune_keeps_newest(self):
        store = {"other": "untouched"}
        cache = ClientCache(store)
        for n in range(5):
            store[cache_key(f"t{n}")] = json.dumps({"content": "", "timestamp": n, "topic": f"t{n}"})

        assert cache.prune(keep=3) == 2
        assert cache.get("t0") is None and cache.get("t1") is None
        assert cache.get("t4") is not None
        assert store["other"] == "untouched"


@pytest.mark.unit
class TestRecentTopics:
    def test_legacy_entries_upgraded(self):
        recent = RecentTopics(["DNA", {"name": "RNA", "timestamp": 3}, {"bad": 1}], clock=lambda: 9)
        assert recent.entries == [{"name": "DNA", "timestamp": 9}, {"name": "RNA", "timestamp": 3}]

    def test_add_dedupes_ignoring_case(self):
        recent = RecentTopics(["DNA", "RNA"], clock=lambda: 1)
        recent.add("dna")
        assert [e["name"] for e in recent.entries] == ["dna", "RNA"]

    def test_capped(self):
        recent = RecentTopics(clock=lambda: 1)
        for n in range(MAX_RECENT_TOPICS + 5):
            recent.add(f"Topic {n}")
        assert len(recent.entries) == MAX_RECENT_TOPICS
        assert recent.entries[0]["name"] == f"Topic {MAX_RECENT_TOPICS + 4}"
        assert len(recent.latest()) == 10


@pytest.mark.unit
class TestSitemap:
    def test_entries(self):
        entries = sitemap_entries("https://tryquartz.wiki", now=datetime(2025, 3, 4, tzinfo=UTC))
        assert len(entries) == len(POPULAR_TOPICS) + 1
        assert entries[0] == {
            "loc": "https://tryquartz.wiki",
            "lastmod": "2025-03-04",
            "changefreq": "daily",
            "priority": "1.0",
        }
        assert entries[1]["loc"] == "https://tryquartz.wiki/page/Quantum_Mechanics"
        assert entries[1]["priority"] == "0.8"

    def test_render_escapes(self):
        xml = render_sitemap([{"loc": "https://x.test/?a=1&b=2"}])
        assert "<loc>https://x.test/?a=1&amp;b=2</loc>" in xml
        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
