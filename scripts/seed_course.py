#!/usr/bin/env python3
"""
seed_course.py - Load a course YAML file into the LearnPath database.

Validates the course file, writes course, lessons and quizzes, and
optionally enrolls a student.

Usage:
  python scripts/seed_course.py courses/python-101.yaml
  python scripts/seed_course.py courses/python-101.yaml --db data/learnpath.db --enroll alice
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from learnpath import config
from learnpath.classroom import PersistenceError, SQLiteStore, load_course_file, seed_store
from learnpath.schemas import Enrollment

logging.basicConfig(
    level=config.LOG_LEVEL,
    format=config.LOG_FORMAT
)
logger = logging.getLogger(__name__)


async def seed(course_file: Path, db_path: Path, student_id: str | None):
    bundle = load_course_file(course_file)
    store = SQLiteStore(db_path)
    await seed_store(store, bundle)

    empty = [q.id for q in bundle.quizzes if q.is_empty]
    if empty:
        logger.warning(f"Quizzes without questions (shown as unavailable): {', '.join(empty)}")

    if student_id:
        existing = await store.find_enrollment(bundle.course.id, student_id)
        if existing:
            logger.info(f"{student_id} already enrolled ({existing.id}, {existing.progress}%)")
        else:
            enrollment = Enrollment(
                id=f"{student_id}:{bundle.course.id}",
                course_id=bundle.course.id,
                student_id=student_id,
            )
            await store.create_enrollment(enrollment)
            logger.info(f"Enrolled {student_id} as {enrollment.id}")


def main():
    parser = argparse.ArgumentParser(description="Seed a course into the LearnPath database")
    parser.add_argument("course_file", type=Path, help="Course YAML file")
    parser.add_argument("--db", type=Path, default=config.DB_PATH, help="SQLite database path")
    parser.add_argument("--enroll", metavar="STUDENT_ID", help="Also enroll this student")
    args = parser.parse_args()

    try:
        asyncio.run(seed(args.course_file, args.db, args.enroll))
    except FileNotFoundError as e:
        logger.error(str(e))
        sys.exit(1)
    except PersistenceError as e:
        logger.error(f"Database write failed: {e}")
        sys.exit(1)

    logger.info("")
    logger.info("=" * 50)
    logger.info("COURSE SEEDED")
    logger.info("=" * 50)
    logger.info(f"Database: {args.db}")
    logger.info(f"Run: LEARNPATH_DB={args.db} LEARNPATH_COURSE_FILE={args.course_file} streamlit run app.py")


if __name__ == "__main__":
    main()
