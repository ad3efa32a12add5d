"""Tests for quiz generation, paging and the retry queue."""
import json
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from quartz.services.quiz.schemas import QuizQuestion
from quartz.services.quiz.service import PAGE_SIZE, QuizService, parse_questions
from quartz.services.quiz.session import QuizSession
from shared.errors import APIException


def make_question(n: int, correct: int = 0) -> dict:
    return {
        "question": f"Question {n}?",
        "options": ["A", "B", "C", "D"],
        "correctIndex": correct,
        "explanation": f"Because {n}",
    }


def quiz_reply(*numbers: int) -> str:
    return json.dumps({"questions": [make_question(n) for n in numbers]})


@pytest.fixture
def service(llm, content_cache) -> QuizService:
    return QuizService(llm, content_cache)


@pytest.mark.unit
class TestQuizQuestion:
    def test_requires_four_options(self):
        with pytest.raises(ValidationError):
            QuizQuestion.model_validate({**make_question(1), "options": ["A", "B", "C"]})

    def test_correct_index_range(self):
        with pytest.raises(ValidationError):
            QuizQuestion.model_validate({**make_question(1), "correctIndex": 4})

    def test_blank_question(self):
        with pytest.raises(ValidationError):
            QuizQuestion.model_validate({**make_question(1), "question": "   "})

    def test_malformed_entries_are_dropped(self):
        raw = json.dumps({"questions": [make_question(1), {"question": "Half?"}, make_question(2)]})
        assert [q.question for q in parse_questions(raw)] == ["Question 1?", "Question 2?"]

    def test_unparseable_reply(self):
        assert parse_questions("Sorry, no quiz today") == []


@pytest.mark.unit
class TestQuizService:
    """Cached paging and fresh generation."""

    @pytest.mark.asyncio
    async def test_topic_required(self, service):
        with pytest.raises(APIException) as exc_info:
            await service.questions(None, None, 0)
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_fresh_questions_are_cached(self, service, llm, content_cache):
        llm.reply = quiz_reply(1, 2, 3, 4, 5)
        result = await service.questions("DNA", "About DNA", None)

        assert result["fresh"] is True
        assert len(result["questions"]) == 5
        assert "id" not in result["questions"][0]
        assert len(content_cache.get_quiz_questions("DNA")) == 5
        assert llm.complete_calls[0]["max_tokens"] == 2000

    @pytest.mark.asyncio
    async def test_cached_pages(self, service, llm, content_cache):
        content_cache.cache_quiz_questions("DNA", [make_question(n) for n in range(7)])

        first = await service.questions("DNA", None, 0)
        assert (first["startIndex"], first["endIndex"]) == (0, PAGE_SIZE)
        second = await service.questions("DNA", None, 5)
        assert (second["startIndex"], second["endIndex"]) == (5, 7)
        assert [q["question"] for q in second["questions"]] == ["Question 5?", "Question 6?"]
        assert llm.complete_calls == []

    @pytest.mark.asyncio
    async def test_past_cache_generates_and_merges(self, service, llm, content_cache):
        content_cache.cache_quiz_questions("DNA", [make_question(1), make_question(2)])
        llm.reply = quiz_reply(2, 3)

        result = await service.questions("DNA", None, 2)

        assert result["fresh"] is True
        assert [q["question"] for q in content_cache.get_quiz_questions("DNA")] == [
            "Question 1?",
            "Question 2?",
            "Question 3?",
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "reply, error, message",
        [
            ("", None, "Failed to generate quiz"),
            ("", RuntimeError("timeout"), "Failed to generate quiz"),
            ('{"questions": []}', None, "Failed to parse quiz"),
        ],
    )
    async def test_failures(self, service, llm, reply, error, message):
        llm.reply = reply
        llm.error = error
        with pytest.raises(APIException) as exc_info:
            await service.questions("DNA", None, 0)
        assert exc_info.value.status_code == 500
        assert exc_info.value.error.message == message


@pytest.mark.unit
class TestQuizSession:
    """Queue handling with a deterministic random source."""

    @pytest.fixture
    def session(self) -> QuizSession:
        rng = MagicMock()
        rng.randint.return_value = 0
        return QuizSession(rng=rng, clock=lambda: 1000)

    def test_load_assigns_ids_and_skips_seen(self, session):
        added = session.load([make_question(1), make_question(2)])
        assert [q.id for q in added] == ["q-1000-0", "q-1000-1"]
        assert session.load([make_question(2), make_question(3)])[0].question == "Question 3?"
        assert len(session.queue) == 3

    def test_ids_number_only_added_questions(self, session):
        session.load([make_question(2)])
        added = session.load([make_question(1), make_question(2), make_question(3)])
        assert [q.id for q in added] == ["q-1000-0", "q-1000-1"]

    def test_submit_grades_once(self, session):
        session.load([make_question(1, correct=2)])
        assert session.submit(2) is True
        with pytest.raises(RuntimeError):
            session.submit(2)

    def test_submit_without_question(self, session):
        with pytest.raises(RuntimeError):
            session.submit(0)

    def test_wrong_answer_returns_after_three(self, session):
        session.load([make_question(n) for n in range(6)])
        assert session.submit(3) is False
        session.advance()
        session.advance()
        assert session.wrong_answers

        session.advance()

        assert [q.question for q in session.queue] == [
            "Question 3?",
            "Question 4?",
            "Question 0?",
            "Question 5?",
        ]
        assert session.queue[2].id == "retry-1000"
        assert session.wrong_answers == []
        assert session.since_retry == 0

    def test_retry_position_capped_by_queue(self, session):
        session.load([make_question(n) for n in range(3)])
        session.submit(1)
        session.advance()
        session.advance()
        current = session.advance()

        assert current.question == "Question 0?"
        assert session.answered_count == 3

    def test_needs_more(self, session):
        session.load([make_question(n) for n in range(3)])
        assert not session.needs_more
        session.advance()
        assert session.needs_more
