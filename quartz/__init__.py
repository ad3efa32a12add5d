"""Quartz: an AI-written encyclopedia served over FastAPI."""

__version__ = "1.0.0"
