"""
LessonNavigator - Lesson sequencing and completion wiring.

Provides:
- Next/previous lesson navigation over the course's ordered lesson list
- Renderer selection by lesson type (video, text, quiz)
- Quiz session lifecycle for quiz lessons
- Completion signals forwarded to the ProgressTracker
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from learnpath.schemas import Lesson, LessonType, Quiz

from .errors import (
    EmptyQuizError,
    InvalidLessonActionError,
    LessonNotFoundError,
    QuizNotFoundError,
)
from .progress import ProgressTracker
from .quiz_session import QuizResult, QuizSession
from .store import ProgressStore

logger = logging.getLogger(__name__)


class QuizAvailability(str, Enum):
    """Quiz status of a lesson for UI display."""
    READY = "ready"         # Session created
    EMPTY = "empty"         # Quiz has no questions
    MISSING = "missing"     # No quiz attached to the lesson


@dataclass
class LessonView:
    """Currently displayed lesson with its renderer state."""
    lesson: Lesson
    position: int                   # 1-based
    total: int
    quiz: Optional[Quiz] = None
    quiz_availability: Optional[QuizAvailability] = None
    session: Optional[QuizSession] = None

    @property
    def renderer(self) -> LessonType:
        return self.lesson.type


class LessonNavigator:
    """
    Navigate a course for one enrollment.

    Combines a ProgressStore (content) with a ProgressTracker (learner state).
    Navigation never depends on completion state; learners may skip ahead.
    """

    def __init__(
        self,
        store: ProgressStore,
        tracker: ProgressTracker,
        enrollment_id: str,
        course_id: str,
    ):
        """
        Args:
            store: Store used to read lessons and quizzes
            tracker: ProgressTracker receiving completion signals
            enrollment_id: Enrollment whose progress is recorded
            course_id: Course being navigated
        """
        self.store = store
        self.tracker = tracker
        self.enrollment_id = enrollment_id
        self.course_id = course_id
        self._lessons: list[Lesson] = []
        self._lesson_index: dict[str, int] = {}
        self._current: Optional[LessonView] = None
        self._pending_completion: Optional[str] = None

    async def load(self):
        """Fetch the ordered lesson list for the course."""
        lessons = await self.store.get_lessons(self.course_id)
        self._lessons = sorted(lessons, key=lambda lesson: lesson.order_index)
        self._lesson_index = {lesson.id: idx for idx, lesson in enumerate(self._lessons)}

    @property
    def lessons(self) -> list[Lesson]:
        return list(self._lessons)

    @property
    def total_lessons(self) -> int:
        return len(self._lessons)

    @property
    def current(self) -> Optional[LessonView]:
        return self._current

    @property
    def session(self) -> Optional[QuizSession]:
        return self._current.session if self._current else None

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    async def open_lesson(self, lesson_id: str) -> LessonView:
        """
        Display a lesson, discarding any quiz attempt in progress.

        Raises:
            LessonNotFoundError: If the lesson is not part of the course
        """
        if lesson_id not in self._lesson_index:
            raise LessonNotFoundError(f"Lesson not found: {lesson_id}")

        idx = self._lesson_index[lesson_id]
        lesson = self._lessons[idx]
        view = LessonView(lesson=lesson, position=idx + 1, total=len(self._lessons))

        if lesson.type == LessonType.QUIZ:
            await self._attach_quiz(view)

        self._current = view
        self._pending_completion = None
        return view

    async def _attach_quiz(self, view: LessonView):
        quiz = await self.store.get_quiz(view.lesson.id)
        if quiz is None:
            logger.warning(f"No quiz attached to lesson {view.lesson.id}")
            view.quiz_availability = QuizAvailability.MISSING
            return

        view.quiz = quiz
        try:
            view.session = QuizSession(quiz)
        except EmptyQuizError:
            logger.warning(f"Quiz {quiz.id} for lesson {view.lesson.id} has no questions")
            view.quiz_availability = QuizAvailability.EMPTY
            return
        view.quiz_availability = QuizAvailability.READY

    def _current_index(self) -> Optional[int]:
        if self._current is None:
            return None
        return self._lesson_index.get(self._current.lesson.id)

    @property
    def has_next(self) -> bool:
        idx = self._current_index()
        return idx is not None and idx + 1 < len(self._lessons)

    @property
    def has_previous(self) -> bool:
        idx = self._current_index()
        return idx is not None and idx > 0

    async def next_lesson(self) -> Optional[LessonView]:
        """Open the next lesson. No-op (returns None) on the last lesson."""
        if not self.has_next:
            return None
        return await self.open_lesson(self._lessons[self._current_index() + 1].id)

    async def previous_lesson(self) -> Optional[LessonView]:
        """Open the previous lesson. No-op (returns None) on the first lesson."""
        if not self.has_previous:
            return None
        return await self.open_lesson(self._lessons[self._current_index() - 1].id)

    def get_lesson_position(self, lesson_id: str) -> tuple[int, int]:
        """
        Get lesson position as (current, total).

        Returns (0, total) if lesson not found.
        """
        if lesson_id not in self._lesson_index:
            return (0, len(self._lessons))
        return (self._lesson_index[lesson_id] + 1, len(self._lessons))

    async def recommended_lesson_id(self) -> Optional[str]:
        """
        Get the lesson to resume at.

        Priority:
        1. First lesson without a completion record
        2. First lesson
        """
        if not self._lessons:
            return None
        completed = await self.tracker.get_completed_lesson_ids(self.enrollment_id)
        for lesson in self._lessons:
            if lesson.id not in completed:
                return lesson.id
        return self._lessons[0].id

    # -------------------------------------------------------------------------
    # Completion signals
    # -------------------------------------------------------------------------

    def _require_lesson(self) -> LessonView:
        if self._current is None:
            raise InvalidLessonActionError("No lesson is open")
        return self._current

    async def _complete(self, lesson_id: str) -> bool:
        self._pending_completion = lesson_id
        completed = await self.tracker.record_lesson_complete(self.enrollment_id, lesson_id)
        self._pending_completion = None
        return completed

    async def mark_complete(self) -> bool:
        """
        Explicit "mark complete" for text and video lessons.

        Quiz lessons complete only by finishing an attempt.
        """
        view = self._require_lesson()
        if view.lesson.type == LessonType.QUIZ:
            raise InvalidLessonActionError(
                f"Quiz lesson {view.lesson.id} completes when the quiz is finished"
            )
        return await self._complete(view.lesson.id)

    async def on_video_progress(self, seconds: int):
        """Playback position ping from the video player."""
        view = self._require_lesson()
        if view.lesson.type != LessonType.VIDEO:
            raise InvalidLessonActionError(f"Lesson {view.lesson.id} is not a video lesson")
        await self.tracker.record_watch_progress(self.enrollment_id, view.lesson.id, seconds)

    async def on_video_ended(self) -> bool:
        """Playback reached the end of the video."""
        view = self._require_lesson()
        if view.lesson.type != LessonType.VIDEO:
            raise InvalidLessonActionError(f"Lesson {view.lesson.id} is not a video lesson")
        return await self._complete(view.lesson.id)

    async def retry_completion(self) -> bool:
        """
        Re-send a completion whose write failed.

        Returns False if there is nothing to retry.
        """
        lesson_id = self._pending_completion
        if lesson_id is None:
            return False
        if not await self.tracker.record_lesson_complete(self.enrollment_id, lesson_id):
            # Record landed before the failure, only the percentage is stale
            await self.tracker.refresh_aggregate(self.enrollment_id)
        self._pending_completion = None
        logger.info(f"Completion of lesson {lesson_id} re-sent for {self.enrollment_id}")
        return True

    @property
    def has_pending_completion(self) -> bool:
        return self._pending_completion is not None

    # -------------------------------------------------------------------------
    # Quiz actions
    # -------------------------------------------------------------------------

    def _require_session(self) -> QuizSession:
        view = self._require_lesson()
        if view.session is not None:
            return view.session
        if view.quiz_availability == QuizAvailability.MISSING:
            raise QuizNotFoundError(f"No quiz attached to lesson {view.lesson.id}")
        if view.quiz_availability == QuizAvailability.EMPTY:
            raise EmptyQuizError(view.quiz.id)
        raise InvalidLessonActionError(f"Lesson {view.lesson.id} is not a quiz lesson")

    def select_answer(self, option_index: int) -> bool:
        return self._require_session().select_answer(option_index)

    def retreat_quiz(self) -> bool:
        return self._require_session().retreat()

    async def advance_quiz(self) -> Optional[QuizResult]:
        """
        Advance the quiz; record completion when the attempt finishes.

        Completion is recorded regardless of score. If the write fails the
        PersistenceError propagates, the session keeps its result, and
        retry_completion() can re-send it.

        Returns:
            The result if this call completed the attempt, otherwise None
        """
        session = self._require_session()
        if not session.advance() or not session.is_completed:
            return None

        result = session.result
        logger.info(
            f"Quiz {session.quiz.id} completed with score {result.score}% "
            f"({result.correct_count}/{result.total})"
        )
        await self._complete(self._current.lesson.id)
        return result

    def retake_quiz(self) -> QuizSession:
        """Start a fresh attempt; previous answers are discarded."""
        session = self._require_session()
        session.reset()
        return session
