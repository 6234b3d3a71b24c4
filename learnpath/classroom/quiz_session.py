"""
QuizSession - State machine for a single quiz attempt.

A session is either presenting question i or completed with a result:
- select_answer() records the learner's choice for the current question
- advance() moves forward once the current question is answered
- retreat() moves back without clearing answers
- reset() starts a fresh attempt against the same quiz

The session is in-memory and synchronous. The score is reported once per
attempt, on entering the completed state.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Union

from learnpath.schemas import Question, Quiz, percent

from .errors import EmptyQuizError


@dataclass(frozen=True)
class QuestionReview:
    """Per-question outcome shown on the results view."""
    question: Question
    selected_index: Optional[int]
    is_correct: bool

    @property
    def selected_option(self) -> Optional[str]:
        if self.selected_index is None:
            return None
        return self.question.options[self.selected_index]


@dataclass(frozen=True)
class QuizResult:
    """Final score of a completed attempt."""
    score: int
    correct_count: int
    total: int
    passing_score: int
    reviews: tuple[QuestionReview, ...]

    @property
    def passed(self) -> bool:
        # Advisory only: completion never depends on passing.
        return self.score >= self.passing_score


@dataclass(frozen=True)
class Presenting:
    index: int


@dataclass(frozen=True)
class Completed:
    result: QuizResult


SessionState = Union[Presenting, Completed]


def score_answers(quiz: Quiz, answers: dict[str, int]) -> QuizResult:
    """
    Score an answer record against a quiz.

    Unanswered questions count as incorrect.
    """
    reviews = []
    for question in quiz.questions:
        selected = answers.get(question.id)
        reviews.append(QuestionReview(
            question=question,
            selected_index=selected,
            is_correct=question.is_correct(selected),
        ))

    correct_count = sum(1 for r in reviews if r.is_correct)
    return QuizResult(
        score=percent(correct_count, quiz.question_count),
        correct_count=correct_count,
        total=quiz.question_count,
        passing_score=quiz.passing_score,
        reviews=tuple(reviews),
    )


class QuizSession:
    """
    Drive one attempt at a quiz.

    Invalid actions (advancing without an answer, an out-of-range option,
    acting on a completed attempt) are rejected as no-ops and return False.
    """

    def __init__(
        self,
        quiz: Quiz,
        on_complete: Optional[Callable[[QuizResult], None]] = None,
        started_at: Optional[datetime] = None,
    ):
        """
        Start an attempt at question 0.

        Args:
            quiz: Quiz to present
            on_complete: Called with the result when the attempt completes
            started_at: Attempt start time (default: now)

        Raises:
            EmptyQuizError: If the quiz has no questions
        """
        if quiz.is_empty:
            raise EmptyQuizError(quiz.id)

        self.quiz = quiz
        self._on_complete = on_complete
        self._answers: dict[str, int] = {}
        self._state: SessionState = Presenting(0)
        self.started_at = started_at or datetime.now()

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def answers(self) -> dict[str, int]:
        """Copy of the answer record (question id -> option index)."""
        return dict(self._answers)

    @property
    def is_completed(self) -> bool:
        return isinstance(self._state, Completed)

    @property
    def result(self) -> Optional[QuizResult]:
        if isinstance(self._state, Completed):
            return self._state.result
        return None

    @property
    def current_index(self) -> Optional[int]:
        if isinstance(self._state, Presenting):
            return self._state.index
        return None

    @property
    def current_question(self) -> Optional[Question]:
        index = self.current_index
        if index is None:
            return None
        return self.quiz.questions[index]

    @property
    def selected_option(self) -> Optional[int]:
        """Recorded answer for the current question, if any."""
        question = self.current_question
        if question is None:
            return None
        return self._answers.get(question.id)

    @property
    def can_advance(self) -> bool:
        return self.selected_option is not None

    @property
    def can_retreat(self) -> bool:
        index = self.current_index
        return index is not None and index > 0

    @property
    def is_last_question(self) -> bool:
        return self.current_index == self.quiz.question_count - 1

    @property
    def position(self) -> tuple[int, int]:
        """(current, total) with 1-based current; (total, total) once completed."""
        total = self.quiz.question_count
        index = self.current_index
        return (total if index is None else index + 1, total)

    @property
    def progress_percent(self) -> int:
        current, total = self.position
        return percent(current, total)

    @property
    def answered_count(self) -> int:
        return len(self._answers)

    # -------------------------------------------------------------------------
    # Time limit (advisory)
    # -------------------------------------------------------------------------

    @property
    def deadline(self) -> Optional[datetime]:
        if self.quiz.time_limit_minutes is None:
            return None
        return self.started_at + timedelta(minutes=self.quiz.time_limit_minutes)

    def remaining_seconds(self, now: Optional[datetime] = None) -> Optional[int]:
        """
        Seconds left before the advisory deadline, floored at 0.

        Returns None when the quiz has no time limit. Expiry never submits
        or locks the attempt.
        """
        deadline = self.deadline
        if deadline is None:
            return None
        now = now or datetime.now()
        return max(0, int((deadline - now).total_seconds()))

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def select_answer(self, option_index: int) -> bool:
        """Record (or replace) the answer for the current question."""
        question = self.current_question
        if question is None:
            return False
        if not 0 <= option_index < len(question.options):
            return False

        self._answers[question.id] = option_index
        return True

    def advance(self) -> bool:
        """
        Move to the next question, or complete the attempt on the last one.

        Returns True if the state changed.
        """
        if not isinstance(self._state, Presenting) or not self.can_advance:
            return False

        index = self._state.index
        if index < self.quiz.question_count - 1:
            self._state = Presenting(index + 1)
            return True

        result = score_answers(self.quiz, self._answers)
        self._state = Completed(result)
        if self._on_complete:
            self._on_complete(result)
        return True

    def retreat(self) -> bool:
        """Move back one question. Recorded answers are kept."""
        if not self.can_retreat:
            return False
        self._state = Presenting(self._state.index - 1)
        return True

    def reset(self):
        """Discard all answers and restart at question 0."""
        self._answers = {}
        self._state = Presenting(0)
        self.started_at = datetime.now()
