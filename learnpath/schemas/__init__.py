"""
LearnPath Schemas - Pydantic models for the course learning platform.

This module exports all schema classes for:
- Quiz: questions, quizzes, percentage helper
- Lesson: courses, lessons, lesson types
- Progress: lesson progress records, enrollments, summaries
"""

# Quiz schemas
from .quiz import (
    Question,
    Quiz,
    DEFAULT_PASSING_SCORE,
    percent,
)

# Lesson schemas
from .lesson import (
    LessonType,
    Course,
    Lesson,
)

# Progress schemas
from .progress import (
    LessonProgress,
    Enrollment,
    CourseProgressSummary,
)

__all__ = [
    # Quiz
    'Question',
    'Quiz',
    'DEFAULT_PASSING_SCORE',
    'percent',
    # Lesson
    'LessonType',
    'Course',
    'Lesson',
    # Progress
    'LessonProgress',
    'Enrollment',
    'CourseProgressSummary',
]
