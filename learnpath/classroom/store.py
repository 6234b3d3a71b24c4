"""
Progress store - Persistence collaborator for the classroom runtime.

Defines the async ProgressStore interface consumed by the progress tracker
and navigator, and SQLiteStore, an aiosqlite implementation:
- Lessons and quizzes (read by the navigator)
- Lesson progress records, unique per (enrollment, lesson)
- Enrollment aggregate percentage

Every call either succeeds or raises PersistenceError.
"""

import json
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import AsyncIterator, Optional, Protocol

import aiosqlite
from pydantic import ValidationError

from learnpath.schemas import Course, Enrollment, Lesson, LessonProgress, Quiz

from .errors import PersistenceError

logger = logging.getLogger(__name__)


class ProgressStore(Protocol):
    """Operations the classroom runtime needs from the backing store."""

    async def get_quiz(self, lesson_id: str) -> Optional[Quiz]:
        ...

    async def get_lessons(self, course_id: str) -> list[Lesson]:
        ...

    async def get_enrollment(self, enrollment_id: str) -> Optional[Enrollment]:
        ...

    async def get_lesson_progress(self, enrollment_id: str) -> list[LessonProgress]:
        ...

    async def upsert_lesson_progress(
        self,
        enrollment_id: str,
        lesson_id: str,
        *,
        completed_at: Optional[datetime] = None,
        watched_duration_seconds: Optional[int] = None,
    ) -> tuple[LessonProgress, bool]:
        ...

    async def update_enrollment_aggregate(self, enrollment_id: str, percentage: int) -> None:
        ...


# -----------------------------------------------------------------------------
# SQLite Schema
# -----------------------------------------------------------------------------

SCHEMA = """
CREATE TABLE IF NOT EXISTS courses (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT
);

CREATE TABLE IF NOT EXISTS lessons (
    id TEXT PRIMARY KEY,
    course_id TEXT NOT NULL,
    title TEXT NOT NULL,
    type TEXT NOT NULL DEFAULT 'text',
    order_index INTEGER NOT NULL,
    duration_minutes INTEGER,
    description TEXT,
    content TEXT,
    video_url TEXT
);

CREATE TABLE IF NOT EXISTS quizzes (
    id TEXT PRIMARY KEY,
    lesson_id TEXT NOT NULL UNIQUE,
    title TEXT NOT NULL,
    description TEXT,
    questions JSON NOT NULL DEFAULT '[]',
    passing_score INTEGER NOT NULL DEFAULT 70,
    time_limit_minutes INTEGER
);

CREATE TABLE IF NOT EXISTS enrollments (
    id TEXT PRIMARY KEY,
    course_id TEXT NOT NULL,
    student_id TEXT NOT NULL,
    progress INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS lesson_progress (
    enrollment_id TEXT NOT NULL,
    lesson_id TEXT NOT NULL,
    completed_at TEXT,
    watched_duration_seconds INTEGER,
    PRIMARY KEY (enrollment_id, lesson_id)
);

CREATE INDEX IF NOT EXISTS idx_lessons_course
ON lessons(course_id, order_index);
"""

SELECT_PROGRESS = """SELECT enrollment_id, lesson_id, completed_at, watched_duration_seconds
                     FROM lesson_progress
                     WHERE enrollment_id = ? AND lesson_id = ?"""


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _row_to_progress(row: aiosqlite.Row) -> LessonProgress:
    return LessonProgress(
        enrollment_id=row["enrollment_id"],
        lesson_id=row["lesson_id"],
        completed_at=_parse_timestamp(row["completed_at"]),
        watched_duration_seconds=row["watched_duration_seconds"],
    )


class SQLiteStore:
    """
    ProgressStore backed by a SQLite file.

    Each operation opens its own connection, so a store can be shared by
    callers running on different event loops.
    """

    def __init__(self, db_path: str | Path):
        """
        Args:
            db_path: Path to the SQLite file (created on first use)
        """
        self.db_path = Path(db_path)
        self._schema_ready = False

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        """Open a connection, creating tables on first use."""
        try:
            if not self._schema_ready:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiosqlite.connect(str(self.db_path)) as conn:
                conn.row_factory = aiosqlite.Row
                if not self._schema_ready:
                    await conn.executescript(SCHEMA)
                    await conn.commit()
                    self._schema_ready = True
                yield conn
        except (aiosqlite.Error, OSError) as e:
            logger.error(f"Store operation failed ({self.db_path}): {e}")
            raise PersistenceError(str(e)) from e

    async def initialize(self):
        """Create the database file and tables if they don't exist."""
        async with self._connect():
            pass

    # -------------------------------------------------------------------------
    # Courses and lessons
    # -------------------------------------------------------------------------

    async def save_course(self, course: Course):
        async with self._connect() as conn:
            await conn.execute(
                """INSERT INTO courses (id, title, description)
                   VALUES (?, ?, ?)
                   ON CONFLICT(id) DO UPDATE SET
                     title = excluded.title,
                     description = excluded.description""",
                (course.id, course.title, course.description)
            )
            await conn.commit()

    async def get_course(self, course_id: str) -> Optional[Course]:
        async with self._connect() as conn:
            async with conn.execute(
                "SELECT id, title, description FROM courses WHERE id = ?",
                (course_id,)
            ) as cursor:
                row = await cursor.fetchone()
        if not row:
            return None
        return Course(id=row["id"], title=row["title"], description=row["description"])

    async def save_lesson(self, lesson: Lesson):
        async with self._connect() as conn:
            await conn.execute(
                """INSERT INTO lessons (id, course_id, title, type, order_index,
                                        duration_minutes, description, content, video_url)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                   ON CONFLICT(id) DO UPDATE SET
                     course_id = excluded.course_id,
                     title = excluded.title,
                     type = excluded.type,
                     order_index = excluded.order_index,
                     duration_minutes = excluded.duration_minutes,
                     description = excluded.description,
                     content = excluded.content,
                     video_url = excluded.video_url""",
                (lesson.id, lesson.course_id, lesson.title, lesson.type.value,
                 lesson.order_index, lesson.duration_minutes, lesson.description,
                 lesson.content, lesson.video_url)
            )
            await conn.commit()

    async def get_lessons(self, course_id: str) -> list[Lesson]:
        """Get all lessons for a course, ordered by order_index."""
        async with self._connect() as conn:
            async with conn.execute(
                """SELECT id, course_id, title, type, order_index, duration_minutes,
                          description, content, video_url
                   FROM lessons
                   WHERE course_id = ?
                   ORDER BY order_index, id""",
                (course_id,)
            ) as cursor:
                rows = await cursor.fetchall()
        return [
            Lesson(
                id=row["id"],
                course_id=row["course_id"],
                title=row["title"],
                type=row["type"],
                order_index=row["order_index"],
                duration_minutes=row["duration_minutes"],
                description=row["description"],
                content=row["content"],
                video_url=row["video_url"],
            )
            for row in rows
        ]

    # -------------------------------------------------------------------------
    # Quizzes
    # -------------------------------------------------------------------------

    async def save_quiz(self, quiz: Quiz):
        questions = json.dumps([q.model_dump() for q in quiz.questions], ensure_ascii=False)
        async with self._connect() as conn:
            await conn.execute(
                """INSERT INTO quizzes (id, lesson_id, title, description, questions,
                                        passing_score, time_limit_minutes)
                   VALUES (?, ?, ?, ?, ?, ?, ?)
                   ON CONFLICT(id) DO UPDATE SET
                     lesson_id = excluded.lesson_id,
                     title = excluded.title,
                     description = excluded.description,
                     questions = excluded.questions,
                     passing_score = excluded.passing_score,
                     time_limit_minutes = excluded.time_limit_minutes""",
                (quiz.id, quiz.lesson_id, quiz.title, quiz.description, questions,
                 quiz.passing_score, quiz.time_limit_minutes)
            )
            await conn.commit()

    async def get_quiz(self, lesson_id: str) -> Optional[Quiz]:
        """
        Get the quiz attached to a lesson, or None if there is none.

        Raises:
            PersistenceError: If the stored quiz cannot be decoded
        """
        async with self._connect() as conn:
            async with conn.execute(
                """SELECT id, lesson_id, title, description, questions,
                          passing_score, time_limit_minutes
                   FROM quizzes
                   WHERE lesson_id = ?""",
                (lesson_id,)
            ) as cursor:
                row = await cursor.fetchone()
        if not row:
            return None

        try:
            return Quiz(
                id=row["id"],
                lesson_id=row["lesson_id"],
                title=row["title"],
                description=row["description"],
                questions=json.loads(row["questions"] or "[]"),
                passing_score=row["passing_score"],
                time_limit_minutes=row["time_limit_minutes"],
            )
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Stored quiz {row['id']} for lesson {lesson_id} is invalid: {e}")
            raise PersistenceError(f"Stored quiz {row['id']} is invalid") from e

    # -------------------------------------------------------------------------
    # Enrollments
    # -------------------------------------------------------------------------

    async def create_enrollment(self, enrollment: Enrollment):
        async with self._connect() as conn:
            await conn.execute(
                """INSERT INTO enrollments (id, course_id, student_id, progress)
                   VALUES (?, ?, ?, ?)
                   ON CONFLICT(id) DO NOTHING""",
                (enrollment.id, enrollment.course_id, enrollment.student_id, enrollment.progress)
            )
            await conn.commit()

    async def get_enrollment(self, enrollment_id: str) -> Optional[Enrollment]:
        async with self._connect() as conn:
            async with conn.execute(
                "SELECT id, course_id, student_id, progress FROM enrollments WHERE id = ?",
                (enrollment_id,)
            ) as cursor:
                row = await cursor.fetchone()
        if not row:
            return None
        return Enrollment(
            id=row["id"],
            course_id=row["course_id"],
            student_id=row["student_id"],
            progress=row["progress"],
        )

    async def find_enrollment(self, course_id: str, student_id: str) -> Optional[Enrollment]:
        """Get a student's enrollment in a course."""
        async with self._connect() as conn:
            async with conn.execute(
                """SELECT id FROM enrollments
                   WHERE course_id = ? AND student_id = ?
                   ORDER BY id LIMIT 1""",
                (course_id, student_id)
            ) as cursor:
                row = await cursor.fetchone()
        if not row:
            return None
        return await self.get_enrollment(row["id"])

    async def update_enrollment_aggregate(self, enrollment_id: str, percentage: int):
        async with self._connect() as conn:
            await conn.execute(
                "UPDATE enrollments SET progress = ? WHERE id = ?",
                (percentage, enrollment_id)
            )
            await conn.commit()

    # -------------------------------------------------------------------------
    # Lesson progress
    # -------------------------------------------------------------------------

    async def get_lesson_progress(self, enrollment_id: str) -> list[LessonProgress]:
        """Get all lesson progress records for an enrollment."""
        async with self._connect() as conn:
            async with conn.execute(
                """SELECT enrollment_id, lesson_id, completed_at, watched_duration_seconds
                   FROM lesson_progress
                   WHERE enrollment_id = ?
                   ORDER BY lesson_id""",
                (enrollment_id,)
            ) as cursor:
                rows = await cursor.fetchall()
        return [_row_to_progress(row) for row in rows]

    async def upsert_lesson_progress(
        self,
        enrollment_id: str,
        lesson_id: str,
        *,
        completed_at: Optional[datetime] = None,
        watched_duration_seconds: Optional[int] = None,
    ) -> tuple[LessonProgress, bool]:
        """
        Create or update the record for (enrollment, lesson) in one transaction.

        An existing completion timestamp is never replaced or cleared, and
        the watched duration is only changed when a new value is given.

        Returns:
            (record as stored after the write, True if this write set completed_at)
        """
        completed = completed_at.isoformat() if completed_at else None
        async with self._connect() as conn:
            # Write lock held from the first read until commit
            await conn.execute("BEGIN IMMEDIATE")
            async with conn.execute(SELECT_PROGRESS, (enrollment_id, lesson_id)) as cursor:
                before = await cursor.fetchone()
            await conn.execute(
                """INSERT INTO lesson_progress
                     (enrollment_id, lesson_id, completed_at, watched_duration_seconds)
                   VALUES (?, ?, ?, ?)
                   ON CONFLICT(enrollment_id, lesson_id) DO UPDATE SET
                     completed_at = COALESCE(lesson_progress.completed_at, excluded.completed_at),
                     watched_duration_seconds = COALESCE(
                       excluded.watched_duration_seconds,
                       lesson_progress.watched_duration_seconds
                     )""",
                (enrollment_id, lesson_id, completed, watched_duration_seconds)
            )
            async with conn.execute(SELECT_PROGRESS, (enrollment_id, lesson_id)) as cursor:
                row = await cursor.fetchone()
            await conn.commit()

        was_completed = before is not None and before["completed_at"] is not None
        record = _row_to_progress(row)
        return record, record.is_completed and not was_completed
