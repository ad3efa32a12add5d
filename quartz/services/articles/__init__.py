"""Article generation: streamed sections, cache replay and page metadata."""

from .service import ArticleService, GenerationPlan
from .streaming import SectionAssembler, SectionStream, format_sse

__all__ = ["ArticleService", "GenerationPlan", "SectionAssembler", "SectionStream", "format_sse"]
