from .service import LEVEL_PROMPTS, SIMPLIFICATION_LEVELS, SimplifyService, resolve_level

__all__ = ["LEVEL_PROMPTS", "SIMPLIFICATION_LEVELS", "SimplifyService", "resolve_level"]
