"""Tests for quartz.utils.text and quartz.utils.dates."""
from datetime import UTC, datetime

import pytest

from quartz.utils.dates import parse_timestamp
from quartz.utils.text import (
    clean_topic,
    extract_concepts,
    extract_json_array,
    extract_json_object,
    format_time_ago,
    heading_slug,
    normalize_topic,
    remove_incomplete_concept,
    split_sections,
    strip_markdown_for_speech,
    table_of_contents,
    to_title_case,
    topic_slug,
)


@pytest.mark.unit
class TestTopicForms:
    """URL, display and cache-key forms of a topic."""

    def test_clean_topic_replaces_underscores(self):
        """Underscores become spaces and the result is trimmed."""
        assert clean_topic(" Black_Holes ") == "Black Holes"

    def test_normalize_topic(self):
        """Cache keys are lower-case and trimmed."""
        assert normalize_topic("  Black Holes ") == "black holes"

    def test_topic_slug_collapses_whitespace(self):
        assert topic_slug("Black   holes") == "Black_holes"

    def test_title_case_keeps_minor_words_lowercase(self):
        """Minor words stay lower-case except at the start."""
        assert to_title_case("the lord of the rings") == "The Lord of the Rings"
        assert to_title_case("war AND peace") == "War and Peace"

    def test_title_case_empty(self):
        assert to_title_case("") == ""


@pytest.mark.unit
class TestFormatTimeAgo:
    """Relative timestamps."""

    def test_just_now(self):
        assert format_time_ago(0, now_ms=59_000) == "Just now"

    def test_minutes(self):
        assert format_time_ago(0, now_ms=60_000) == "1 minute ago"
        assert format_time_ago(0, now_ms=5 * 60_000) == "5 minutes ago"

    def test_hours_and_days(self):
        assert format_time_ago(0, now_ms=2 * 3_600_000) == "2 hours ago"
        assert format_time_ago(0, now_ms=24 * 3_600_000) == "1 day ago"
        assert format_time_ago(0, now_ms=3 * 24 * 3_600_000) == "3 days ago"


@pytest.mark.unit
class TestConceptCleanup:
    """Dangling concept links left by truncated streams."""

    def test_trailing_open_brackets_removed(self):
        assert remove_incomplete_concept("Light from the [[") == "Light from the "

    def test_unclosed_concept_removed(self):
        assert remove_incomplete_concept("Made of [[black ho") == "Made of "

    def test_closed_concepts_kept(self):
        text = "The [[Sun]] heats [[Earth]]."
        assert remove_incomplete_concept(text) == text

    def test_only_last_unclosed_concept_removed(self):
        assert remove_incomplete_concept("[[DNA]] and [[RN") == "[[DNA]] and "

    def test_extract_concepts_dedupes_case_insensitively(self):
        assert extract_concepts("[[DNA]] uses [[dna]] and [[RNA]]") == ["DNA", "RNA"]


@pytest.mark.unit
class TestMarkdown:
    """Markdown helpers."""

    def test_split_sections(self):
        content = "Intro\n## A\ntext\n## B\nmore"
        assert split_sections(content) == ["Intro", "\n## A\ntext", "\n## B\nmore"]

    def test_split_sections_drops_blank_chunks(self):
        assert split_sections("\n## Only\nbody") == ["\n## Only\nbody"]

    def test_strip_markdown_for_speech(self):
        text = "## Intro\n**Bold** [[DNA]] *it* `code`\n\n\n\nEnd"
        assert strip_markdown_for_speech(text) == "Intro\nBold DNA it code\n\nEnd"

    def test_heading_slug(self):
        assert heading_slug("Black Holes") == "black-holes"
        assert heading_slug("Types of UV (light)") == "types-of-uv-light-"

    def test_table_of_contents(self):
        content = "Intro\n### Orphan\n## [[Physics]] Basics\n### Sub *one*\n## Next\n"
        assert table_of_contents(content) == [
            {
                "id": "physics-basics",
                "text": "Physics Basics",
                "subsections": [{"id": "sub-one", "text": "Sub one", "level": 3}],
            },
            {"id": "next", "text": "Next", "subsections": []},
        ]


@pytest.mark.unit
class TestJsonExtraction:
    """Pulling JSON out of chatty model replies."""

    def test_object_inside_prose(self):
        assert extract_json_object('Here you go: {"a": 1} enjoy') == {"a": 1}

    def test_invalid_object(self):
        assert extract_json_object("{not json}") is None
        assert extract_json_object("") is None

    def test_array_inside_prose(self):
        assert extract_json_array('Sure ["a", "b"] done') == ["a", "b"]

    def test_array_missing(self):
        assert extract_json_array("no list here") is None


@pytest.mark.unit
class TestParseTimestamp:
    def test_naive_is_utc(self):
        assert parse_timestamp("2025-01-02T03:04:05") == datetime(2025, 1, 2, 3, 4, 5, tzinfo=UTC)

    def test_zulu_suffix(self):
        assert parse_timestamp("2025-01-02T03:04:05Z") == datetime(2025, 1, 2, 3, 4, 5, tzinfo=UTC)

    def test_garbage(self):
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp(None) is None
