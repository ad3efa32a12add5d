from .text import (
    clean_topic,
    extract_concepts,
    format_time_ago,
    normalize_topic,
    table_of_contents,
    to_title_case,
    topic_slug,
)

__all__ = [
    "clean_topic",
    "extract_concepts",
    "format_time_ago",
    "normalize_topic",
    "table_of_contents",
    "to_title_case",
    "topic_slug",
]
