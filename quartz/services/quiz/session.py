"""
Quiz session state: the question queue with spaced retry of wrong answers.

A wrongly answered question comes back a few questions later (after 3-5
further questions, inserted 2-4 places down the queue) so the reader meets
it again before the quiz moves on.
"""

import random
import time
from collections.abc import Callable
from typing import Any, Optional

from .schemas import QuizQuestion

REFILL_THRESHOLD = 3


def _now_ms() -> int:
    return int(time.time() * 1000)


class QuizSession:
    def __init__(self, rng: Optional[random.Random] = None, clock: Callable[[], int] = _now_ms):
        self.rng = rng or random.Random()
        self.clock = clock
        self.queue: list[QuizQuestion] = []
        self.wrong_answers: list[QuizQuestion] = []
        self.seen: set[str] = set()
        self.answered_count = 0
        self.since_retry = 0
        self.answered = False

    @property
    def current(self) -> Optional[QuizQuestion]:
        return self.queue[0] if self.queue else None

    @property
    def needs_more(self) -> bool:
        return len(self.queue) < REFILL_THRESHOLD

    def load(self, questions: list[Any]) -> list[QuizQuestion]:
        """Queue questions not seen before; returns those actually added."""
        stamp = self.clock()
        added = []
        for item in questions:
            question = item if isinstance(item, QuizQuestion) else QuizQuestion.model_validate(item)
            if question.question in self.seen:
                continue
            added.append(question.model_copy(update={"id": f"q-{stamp}-{len(added)}"}))
            self.seen.add(question.question)
        self.queue.extend(added)
        return added

    def submit(self, answer_index: int) -> bool:
        """Grade the current question; wrong answers are kept for a retry."""
        question = self.current
        if question is None or self.answered:
            raise RuntimeError("No unanswered question to submit")
        self.answered = True
        correct = answer_index == question.correctIndex
        if not correct:
            self.wrong_answers.append(question)
        return correct

    def advance(self) -> Optional[QuizQuestion]:
        """Move to the next question, possibly re-inserting an earlier miss."""
        queue_length = len(self.queue)
        if self.queue:
            self.queue.pop(0)
        self.answered_count += 1
        self.answered = False
        self.since_retry += 1

        if self.wrong_answers and self.since_retry >= 3 + self.rng.randint(0, 2):
            retry = self.wrong_answers.pop(0)
            position = min(2 + self.rng.randint(0, 2), queue_length)
            self.queue.insert(position, retry.model_copy(update={"id": f"retry-{self.clock()}"}))
            self.since_retry = 0

        return self.current
