"""
Course loader - Load course definitions from YAML files.

A course file holds the course, its ordered lessons and, for quiz lessons,
an inline quiz block:

    course:
      id: python-101
      title: Python Basics
    lessons:
      - id: intro
        title: Welcome
        type: video
        video_url: https://example.com/intro.mp4
      - id: check
        title: Check your understanding
        type: quiz
        quiz:
          passing_score: 70
          questions:
            - id: q1
              question: What does len("abc") return?
              options: ["2", "3"]
              correctAnswer: 1
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel

from learnpath.schemas import Course, Lesson, LessonType, Quiz

from .store import SQLiteStore

logger = logging.getLogger(__name__)


class CourseBundle(BaseModel):
    """Validated contents of a course file."""
    course: Course
    lessons: list[Lesson]
    quizzes: list[Quiz] = []


def parse_course(data: dict[str, Any]) -> CourseBundle:
    """
    Build a CourseBundle from parsed YAML.

    Lessons without an explicit order_index are ordered by their position
    in the file. A quiz block defaults its id to "<lesson id>-quiz" and its
    title to the lesson title.

    Raises:
        ValueError: If a quiz block is attached to a non-quiz lesson
        pydantic.ValidationError: If any entry fails validation
    """
    course = Course(**data["course"])
    lessons = []
    quizzes = []

    for position, entry in enumerate(data.get("lessons") or []):
        entry = dict(entry)
        quiz_data = entry.pop("quiz", None)
        entry.setdefault("course_id", course.id)
        entry.setdefault("order_index", position)
        lesson = Lesson(**entry)
        lessons.append(lesson)

        if quiz_data is None:
            continue
        if lesson.type != LessonType.QUIZ:
            raise ValueError(f"Lesson {lesson.id} has a quiz block but type '{lesson.type.value}'")

        quiz_data = dict(quiz_data)
        quiz_data.setdefault("id", f"{lesson.id}-quiz")
        quiz_data.setdefault("title", lesson.title)
        quiz_data["lesson_id"] = lesson.id
        quizzes.append(Quiz(**quiz_data))

    return CourseBundle(course=course, lessons=lessons, quizzes=quizzes)


def load_course_file(path: str | Path) -> CourseBundle:
    """
    Load and validate a course file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If YAML parsing fails
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Course file not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    bundle = parse_course(data)
    logger.info(f"Loaded course {bundle.course.id}: {len(bundle.lessons)} lessons, {len(bundle.quizzes)} quizzes")
    return bundle


async def seed_store(store: SQLiteStore, bundle: CourseBundle):
    """
    Write a course bundle into a SQLiteStore.

    Existing rows with the same ids are updated in place; learner progress
    is left untouched.
    """
    await store.save_course(bundle.course)
    for lesson in bundle.lessons:
        await store.save_lesson(lesson)
    for quiz in bundle.quizzes:
        await store.save_quiz(quiz)
    logger.info(f"Seeded course {bundle.course.id} into {store.db_path}")
