"""Quiz generation and the spaced-retry question queue."""

from .schemas import QuizQuestion
from .service import QuizService
from .session import QuizSession

__all__ = ["QuizQuestion", "QuizService", "QuizSession"]
