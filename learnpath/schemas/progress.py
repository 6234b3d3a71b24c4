"""
Progress tracking schemas for LearnPath.

Defines Pydantic models for learner progress including:
- Per-lesson progress records (one per enrollment + lesson)
- Enrollments carrying the stored course percentage
- Course progress summary for display
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class LessonProgress(BaseModel):
    enrollment_id: str
    lesson_id: str
    completed_at: Optional[datetime] = None
    watched_duration_seconds: Optional[int] = Field(default=None, ge=0)

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None


class Enrollment(BaseModel):
    id: str
    course_id: str
    student_id: str = "default"  # single-learner mode
    progress: int = Field(default=0, ge=0, le=100)


class CourseProgressSummary(BaseModel):
    enrollment_id: str
    course_id: str
    completed: int
    total_lessons: int
    completion_percent: int
    watched_seconds: int = 0
    completed_lesson_ids: list[str] = []
