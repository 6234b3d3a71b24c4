"""Exceptions raised by the classroom runtime."""


class ClassroomError(Exception):
    """Base exception for quiz sessions, progress tracking and navigation."""
    pass


class EmptyQuizError(ClassroomError):
    """Quiz exists but has no questions to present."""

    def __init__(self, quiz_id: str):
        super().__init__(f"Quiz has no questions: {quiz_id}")
        self.quiz_id = quiz_id


class NotFoundError(ClassroomError):
    """Requested lesson, quiz or enrollment does not exist."""
    pass


class LessonNotFoundError(NotFoundError):
    pass


class QuizNotFoundError(NotFoundError):
    pass


class EnrollmentNotFoundError(NotFoundError):
    pass


class PersistenceError(ClassroomError):
    """Progress store read or write failed. Safe to retry."""
    pass


class InvalidLessonActionError(ClassroomError):
    """Completion signal does not apply to the current lesson type."""
    pass
