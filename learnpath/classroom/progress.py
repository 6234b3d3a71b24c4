"""
ProgressTracker - Record lesson completion and course percentage.

Writes go through a ProgressStore:
- Lesson completion (idempotent, one record per enrollment + lesson)
- Video watch time (last write wins, never completes a lesson)
- Course percentage, derived from the completed records on each new completion
"""

import logging
from datetime import datetime
from typing import Optional

from learnpath.schemas import CourseProgressSummary, Enrollment, percent

from .errors import EnrollmentNotFoundError
from .store import ProgressStore

logger = logging.getLogger(__name__)


class ProgressTracker:
    """
    Track learner progress through a ProgressStore.

    Completion and aggregate writes for one event are awaited in order, so
    the recompute always sees the record it follows. Store failures
    propagate as PersistenceError; nothing is retried here.
    """

    def __init__(self, store: ProgressStore):
        """
        Args:
            store: Persistence collaborator
        """
        self.store = store

    async def _get_enrollment(self, enrollment_id: str) -> Enrollment:
        enrollment = await self.store.get_enrollment(enrollment_id)
        if enrollment is None:
            raise EnrollmentNotFoundError(f"Enrollment not found: {enrollment_id}")
        return enrollment

    # -------------------------------------------------------------------------
    # Lesson Progress
    # -------------------------------------------------------------------------

    async def record_lesson_complete(
        self,
        enrollment_id: str,
        lesson_id: str,
        now: Optional[datetime] = None,
    ) -> bool:
        """
        Mark a lesson as completed for an enrollment.

        Args:
            enrollment_id: Enrollment the completion belongs to
            lesson_id: Completed lesson
            now: Completion timestamp (default: current time)

        Returns:
            True if this call completed the lesson, False if it was already complete
        """
        completed_at = now or datetime.now()
        _, transitioned = await self.store.upsert_lesson_progress(
            enrollment_id, lesson_id, completed_at=completed_at
        )

        if not transitioned:
            logger.debug(f"Lesson {lesson_id} already completed for {enrollment_id}")
            return False

        percentage = await self.compute_aggregate(enrollment_id)
        await self.store.update_enrollment_aggregate(enrollment_id, percentage)
        logger.info(f"Lesson {lesson_id} completed for {enrollment_id} (course progress {percentage}%)")
        return True

    async def record_watch_progress(self, enrollment_id: str, lesson_id: str, seconds: int):
        """Store the watched duration of a video lesson."""
        if seconds < 0:
            raise ValueError(f"watched seconds must be >= 0, got {seconds}")
        await self.store.upsert_lesson_progress(
            enrollment_id, lesson_id, watched_duration_seconds=int(seconds)
        )

    async def get_completed_lesson_ids(self, enrollment_id: str) -> set[str]:
        """Get set of completed lesson IDs."""
        records = await self.store.get_lesson_progress(enrollment_id)
        return {r.lesson_id for r in records if r.is_completed}

    async def is_lesson_completed(self, enrollment_id: str, lesson_id: str) -> bool:
        return lesson_id in await self.get_completed_lesson_ids(enrollment_id)

    # -------------------------------------------------------------------------
    # Aggregate
    # -------------------------------------------------------------------------

    async def compute_aggregate(self, enrollment_id: str) -> int:
        """
        Course completion percentage for an enrollment.

        Derived from the stored records each time; records for lessons that
        are no longer part of the course are ignored. Returns 0 for a course
        without lessons.
        """
        summary = await self.get_summary(enrollment_id)
        return summary.completion_percent

    async def refresh_aggregate(self, enrollment_id: str) -> int:
        """Recompute and store the course percentage without recording anything."""
        percentage = await self.compute_aggregate(enrollment_id)
        await self.store.update_enrollment_aggregate(enrollment_id, percentage)
        return percentage

    async def get_summary(self, enrollment_id: str) -> CourseProgressSummary:
        """Get completion statistics for an enrollment's course."""
        enrollment = await self._get_enrollment(enrollment_id)
        lessons = await self.store.get_lessons(enrollment.course_id)
        records = await self.store.get_lesson_progress(enrollment_id)

        lesson_ids = {lesson.id for lesson in lessons}
        course_records = [r for r in records if r.lesson_id in lesson_ids]
        completed_ids = [r.lesson_id for r in course_records if r.is_completed]

        return CourseProgressSummary(
            enrollment_id=enrollment_id,
            course_id=enrollment.course_id,
            completed=len(completed_ids),
            total_lessons=len(lessons),
            completion_percent=percent(len(completed_ids), len(lessons)),
            watched_seconds=sum(r.watched_duration_seconds or 0 for r in course_records),
            completed_lesson_ids=completed_ids,
        )
