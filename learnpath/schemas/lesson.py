"""
Course and lesson schemas for LearnPath.

Lessons are ordered by `order_index` within a course and rendered by type:
video, text or quiz.
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class LessonType(str, Enum):
    VIDEO = "video"
    TEXT = "text"
    QUIZ = "quiz"


class Course(BaseModel):
    id: str
    title: str
    description: Optional[str] = None


class Lesson(BaseModel):
    """Lesson metadata and inline content (text body or video URL)."""
    model_config = ConfigDict(frozen=True)

    id: str
    course_id: str
    title: str
    type: LessonType = LessonType.TEXT
    order_index: int = Field(..., ge=0)
    duration_minutes: Optional[int] = Field(default=None, gt=0)
    description: Optional[str] = None
    content: Optional[str] = None
    video_url: Optional[str] = None
