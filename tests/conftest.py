"""Shared fixtures for LearnPath tests."""

import pytest

from learnpath.classroom import ProgressTracker, SQLiteStore
from learnpath.schemas import Course, Enrollment, Lesson, LessonType, Question, Quiz


def make_question(qid: str, correct: int, options: int = 3) -> Question:
    return Question(
        id=qid,
        question=f"Question {qid}?",
        options=[f"{qid} option {i}" for i in range(options)],
        correct_answer=correct,
    )


def make_quiz(corrects: list[int], quiz_id: str = "quiz-1", lesson_id: str = "lesson-quiz", **kwargs) -> Quiz:
    """Quiz whose i-th question has id q{i} and correct option corrects[i]."""
    return Quiz(
        id=quiz_id,
        lesson_id=lesson_id,
        title="Checkpoint",
        questions=[make_question(f"q{i}", c) for i, c in enumerate(corrects)],
        **kwargs,
    )


@pytest.fixture
def three_question_quiz():
    """Questions with correct options [0, 2, 1]."""
    return make_quiz([0, 2, 1])


@pytest.fixture
def course_lessons():
    """Four lessons: video, text, quiz, text."""
    return [
        Lesson(id="lesson-video", course_id="course-1", title="Intro video",
               type=LessonType.VIDEO, order_index=0, duration_minutes=5,
               video_url="https://example.com/intro.mp4"),
        Lesson(id="lesson-text", course_id="course-1", title="Reading",
               type=LessonType.TEXT, order_index=1, content="Some text"),
        Lesson(id="lesson-quiz", course_id="course-1", title="Checkpoint",
               type=LessonType.QUIZ, order_index=2),
        Lesson(id="lesson-final", course_id="course-1", title="Wrap-up",
               type=LessonType.TEXT, order_index=3, content="Done"),
    ]


@pytest.fixture
def store(tmp_path):
    return SQLiteStore(tmp_path / "learnpath.db")


@pytest.fixture
async def seeded_store(store, course_lessons, three_question_quiz):
    """Store holding course-1 with its lessons, its quiz and enrollment enr-1."""
    await store.save_course(Course(id="course-1", title="Course One"))
    for lesson in course_lessons:
        await store.save_lesson(lesson)
    await store.save_quiz(three_question_quiz)
    await store.create_enrollment(Enrollment(id="enr-1", course_id="course-1", student_id="alice"))
    return store


@pytest.fixture
def tracker(seeded_store):
    return ProgressTracker(seeded_store)
