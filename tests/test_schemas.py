"""
Schema validation tests for LearnPath.

Tests all Pydantic models to ensure they validate correctly.
"""

import pytest
from datetime import datetime
from pydantic import ValidationError

from learnpath.schemas import (
    # Quiz
    Question,
    Quiz,
    DEFAULT_PASSING_SCORE,
    percent,
    # Lesson
    LessonType,
    Course,
    Lesson,
    # Progress
    LessonProgress,
    Enrollment,
    CourseProgressSummary,
)


class TestPercent:
    """Test the shared percentage helper."""

    def test_two_thirds(self):
        assert percent(2, 3) == 67

    def test_one_third(self):
        assert percent(1, 3) == 33

    def test_halves_round_up(self):
        assert percent(1, 8) == 13
        assert percent(1, 200) == 1

    def test_bounds(self):
        assert percent(0, 5) == 0
        assert percent(5, 5) == 100

    def test_zero_total(self):
        assert percent(0, 0) == 0


class TestQuestionSchema:
    """Test question validation."""

    def test_question_valid(self):
        q = Question(id="q1", question="2 + 2?", options=["3", "4"], correct_answer=1)
        assert q.options == ("3", "4")
        assert q.correct_option == "4"
        assert q.explanation is None

    def test_question_accepts_stored_aliases(self):
        q = Question.model_validate({
            "id": "q1",
            "prompt": "Capital of France?",
            "options": ["Paris", "Rome", "Madrid", "Berlin"],
            "correctAnswer": 0,
            "explanation": "Paris is the capital.",
        })
        assert q.question == "Capital of France?"
        assert q.correct_answer == 0

    def test_question_needs_two_options(self):
        with pytest.raises(ValidationError):
            Question(id="q1", question="Only one?", options=["yes"], correct_answer=0)

    def test_question_rejects_blank_option(self):
        with pytest.raises(ValidationError):
            Question(id="q1", question="Blank?", options=["a", "  "], correct_answer=0)

    def test_question_rejects_blank_text(self):
        with pytest.raises(ValidationError):
            Question(id="q1", question="   ", options=["a", "b"], correct_answer=0)

    def test_correct_answer_out_of_range(self):
        with pytest.raises(ValidationError):
            Question(id="q1", question="Which?", options=["a", "b"], correct_answer=2)
        with pytest.raises(ValidationError):
            Question(id="q1", question="Which?", options=["a", "b"], correct_answer=-1)

    def test_is_correct(self):
        q = Question(id="q1", question="Which?", options=["a", "b"], correct_answer=1)
        assert q.is_correct(1)
        assert not q.is_correct(0)
        assert not q.is_correct(None)

    def test_question_is_immutable(self):
        q = Question(id="q1", question="Which?", options=["a", "b"], correct_answer=1)
        with pytest.raises(ValidationError):
            q.correct_answer = 0


class TestQuizSchema:
    """Test quiz validation."""

    def test_quiz_defaults(self):
        quiz = Quiz(id="quiz", lesson_id="l1", title=" Checkpoint ")
        assert quiz.title == "Checkpoint"
        assert quiz.passing_score == DEFAULT_PASSING_SCORE
        assert quiz.time_limit_minutes is None
        assert quiz.is_empty
        assert quiz.question_count == 0

    def test_quiz_preserves_question_order(self):
        quiz = Quiz(
            id="quiz",
            lesson_id="l1",
            title="Order",
            questions=[
                {"id": "b", "question": "B?", "options": ["x", "y"], "correct_answer": 0},
                {"id": "a", "question": "A?", "options": ["x", "y"], "correct_answer": 1},
            ],
        )
        assert [q.id for q in quiz.questions] == ["b", "a"]

    def test_quiz_duplicate_question_ids(self):
        q = {"id": "dup", "question": "?", "options": ["x", "y"], "correct_answer": 0}
        with pytest.raises(ValidationError):
            Quiz(id="quiz", lesson_id="l1", title="Dup", questions=[q, q])

    def test_quiz_requires_title(self):
        with pytest.raises(ValidationError):
            Quiz(id="quiz", lesson_id="l1", title="  ")

    def test_passing_score_bounds(self):
        Quiz(id="quiz", lesson_id="l1", title="T", passing_score=0)
        Quiz(id="quiz", lesson_id="l1", title="T", passing_score=100)
        with pytest.raises(ValidationError):
            Quiz(id="quiz", lesson_id="l1", title="T", passing_score=101)

    def test_time_limit_positive(self):
        with pytest.raises(ValidationError):
            Quiz(id="quiz", lesson_id="l1", title="T", time_limit_minutes=0)


class TestLessonSchemas:
    """Test course and lesson schemas."""

    def test_lesson_type_values(self):
        assert LessonType.VIDEO.value == "video"
        assert LessonType.TEXT.value == "text"
        assert LessonType.QUIZ.value == "quiz"

    def test_lesson_valid(self):
        lesson = Lesson(id="l1", course_id="c1", title="Intro", type="video", order_index=0)
        assert lesson.type == LessonType.VIDEO
        assert lesson.duration_minutes is None

    def test_lesson_defaults_to_text(self):
        lesson = Lesson(id="l1", course_id="c1", title="Intro", order_index=0)
        assert lesson.type == LessonType.TEXT

    def test_lesson_invalid_type(self):
        with pytest.raises(ValidationError):
            Lesson(id="l1", course_id="c1", title="Intro", type="podcast", order_index=0)

    def test_course_valid(self):
        course = Course(id="c1", title="Course")
        assert course.description is None


class TestProgressSchemas:
    """Test progress-related schemas."""

    def test_lesson_progress_defaults(self):
        progress = LessonProgress(enrollment_id="e1", lesson_id="l1")
        assert progress.completed_at is None
        assert progress.watched_duration_seconds is None
        assert not progress.is_completed

    def test_lesson_progress_completed(self):
        progress = LessonProgress(
            enrollment_id="e1",
            lesson_id="l1",
            completed_at=datetime(2026, 1, 1, 10, 0),
            watched_duration_seconds=120,
        )
        assert progress.is_completed

    def test_lesson_progress_negative_watch_time(self):
        with pytest.raises(ValidationError):
            LessonProgress(enrollment_id="e1", lesson_id="l1", watched_duration_seconds=-1)

    def test_enrollment_defaults(self):
        enrollment = Enrollment(id="e1", course_id="c1")
        assert enrollment.student_id == "default"
        assert enrollment.progress == 0

    def test_summary_valid(self):
        summary = CourseProgressSummary(
            enrollment_id="e1",
            course_id="c1",
            completed=1,
            total_lessons=4,
            completion_percent=25,
        )
        assert summary.watched_seconds == 0
        assert summary.completed_lesson_ids == []


class TestSchemaImports:
    """Test that all schemas can be imported from the package."""

    def test_import_from_learnpath_schemas(self):
        from learnpath import schemas
        for name in schemas.__all__:
            assert hasattr(schemas, name)
