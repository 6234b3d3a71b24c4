"""
Quiz schemas for LearnPath.

Defines Pydantic models for quiz content:
- Multiple-choice questions with a single correct option
- Quizzes (ordered questions, passing score, advisory time limit)
- Percentage helper shared by quiz scoring and course progress
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional


DEFAULT_PASSING_SCORE = 70


def percent(part: int, total: int) -> int:
    """
    Whole-number percentage of part/total, rounding halves up.

    Returns 0 when total is 0 so callers never divide by zero.
    """
    if total <= 0:
        return 0
    return (200 * part + total) // (2 * total)


# -----------------------------------------------------------------------------
# Question
# -----------------------------------------------------------------------------

class Question(BaseModel):
    """
    Multiple-choice question.

    Stored quizzes use `correctAnswer`; both spellings are accepted on input.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    question: str = Field(..., validation_alias=AliasChoices('question', 'prompt'))
    options: tuple[str, ...]
    correct_answer: int = Field(
        ..., ge=0, validation_alias=AliasChoices('correct_answer', 'correctAnswer')
    )
    explanation: Optional[str] = None

    @field_validator('question')
    @classmethod
    def question_not_blank(cls, v):
        if not v.strip():
            raise ValueError('question text must not be empty')
        return v

    @field_validator('options')
    @classmethod
    def options_valid(cls, v):
        if len(v) < 2:
            raise ValueError('a question needs at least 2 options')
        if any(not opt.strip() for opt in v):
            raise ValueError('options must not be empty')
        return v

    @model_validator(mode='after')
    def correct_answer_in_range(self):
        if self.correct_answer >= len(self.options):
            raise ValueError(
                f'correct_answer {self.correct_answer} out of range for {len(self.options)} options'
            )
        return self

    def is_correct(self, option_index: Optional[int]) -> bool:
        return option_index is not None and option_index == self.correct_answer

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_answer]


# -----------------------------------------------------------------------------
# Quiz
# -----------------------------------------------------------------------------

class Quiz(BaseModel):
    """
    Quiz attached to a lesson.

    Question order is presentation order. A quiz with no questions is valid
    content; the session engine reports it as unavailable.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    lesson_id: str
    title: str
    description: Optional[str] = None
    questions: tuple[Question, ...] = ()
    passing_score: int = Field(default=DEFAULT_PASSING_SCORE, ge=0, le=100)
    time_limit_minutes: Optional[int] = Field(default=None, gt=0)

    @field_validator('title')
    @classmethod
    def title_not_blank(cls, v):
        if not v.strip():
            raise ValueError('quiz title is required')
        return v.strip()

    @field_validator('questions')
    @classmethod
    def question_ids_unique(cls, v):
        seen = set()
        for q in v:
            if q.id in seen:
                raise ValueError(f'duplicate question id: {q.id}')
            seen.add(q.id)
        return v

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def is_empty(self) -> bool:
        return not self.questions
