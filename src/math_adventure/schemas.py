"""Validation of quiz payloads returned by the content provider."""
from typing import Any

from pydantic import BaseModel, field_validator, model_validator

from math_adventure.models import QuizQuestion

OPTION_COUNT = 4


class QuizQuestionIn(BaseModel):
    id: int
    question: str
    options: list[str]
    correctAnswer: int
    explanation: str

    model_config = {"strict": True}

    @field_validator("question")
    @classmethod
    def question_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("question is blank")
        return v

    @field_validator("options")
    @classmethod
    def four_options(cls, v: list[str]) -> list[str]:
        if len(v) != OPTION_COUNT:
            raise ValueError(f"expected {OPTION_COUNT} options, got {len(v)}")
        return [o.strip() for o in v]

    @model_validator(mode="after")
    def answer_in_range(self) -> "QuizQuestionIn":
        if not 0 <= self.correctAnswer < len(self.options):
            raise ValueError(f"correctAnswer {self.correctAnswer} out of range")
        return self

    def to_question(self) -> QuizQuestion:
        return QuizQuestion(
            id=self.id,
            question=self.question,
            options=tuple(self.options),
            correct_answer=self.correctAnswer,
            explanation=self.explanation.strip(),
        )


def parse_quiz_batch(payload: Any, batch_size: int) -> list[QuizQuestion]:
    """Validate a decoded payload into exactly ``batch_size`` questions.

    Raises ``ValueError`` (``ValidationError`` is a subclass) when the payload
    is not a list, is short, or contains any malformed item. Extra items past
    ``batch_size`` are dropped.
    """
    if not isinstance(payload, list):
        raise ValueError(f"expected a JSON array, got {type(payload).__name__}")
    if len(payload) < batch_size:
        raise ValueError(f"expected {batch_size} questions, got {len(payload)}")
    return [QuizQuestionIn.model_validate(item).to_question() for item in payload[:batch_size]]
