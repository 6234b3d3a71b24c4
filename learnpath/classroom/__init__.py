"""
LearnPath Classroom - Runtime components for taking lessons and quizzes.

This module provides:
- QuizSession: State machine for one quiz attempt
- ProgressTracker: Lesson completion and course percentage
- LessonNavigator: Lesson sequencing and completion wiring
- SQLiteStore: aiosqlite-backed persistence
- Course loader: YAML course files
"""

from .errors import (
    ClassroomError,
    EmptyQuizError,
    NotFoundError,
    LessonNotFoundError,
    QuizNotFoundError,
    EnrollmentNotFoundError,
    PersistenceError,
    InvalidLessonActionError,
)

from .quiz_session import (
    QuizSession,
    QuizResult,
    QuestionReview,
    Presenting,
    Completed,
    SessionState,
    score_answers,
)

from .store import (
    ProgressStore,
    SQLiteStore,
)

from .progress import (
    ProgressTracker,
)

from .navigator import (
    LessonNavigator,
    LessonView,
    QuizAvailability,
)

from .loader import (
    CourseBundle,
    parse_course,
    load_course_file,
    seed_store,
)

__all__ = [
    # Errors
    "ClassroomError",
    "EmptyQuizError",
    "NotFoundError",
    "LessonNotFoundError",
    "QuizNotFoundError",
    "EnrollmentNotFoundError",
    "PersistenceError",
    "InvalidLessonActionError",
    # Quiz session
    "QuizSession",
    "QuizResult",
    "QuestionReview",
    "Presenting",
    "Completed",
    "SessionState",
    "score_answers",
    # Store
    "ProgressStore",
    "SQLiteStore",
    # Progress
    "ProgressTracker",
    # Navigator
    "LessonNavigator",
    "LessonView",
    "QuizAvailability",
    # Loader
    "CourseBundle",
    "parse_course",
    "load_course_file",
    "seed_store",
]
