"""Quiz question model shared by the generator and the retry queue."""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class QuizQuestion(BaseModel):
    question: str
    options: list[str] = Field(min_length=4, max_length=4)
    correctIndex: int = Field(ge=0, le=3)
    explanation: str = ""
    id: Optional[str] = None

    @field_validator("question")
    @classmethod
    def question_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("question is blank")
        return value


class GamifyRequest(BaseModel):
    topic: Optional[str] = None
    content: Optional[str] = None
    startIndex: Optional[int] = None


class GamifyResponse(BaseModel):
    questions: list[dict[str, Any]]
    startIndex: Optional[int] = None
    endIndex: Optional[int] = None
    fresh: Optional[bool] = None
