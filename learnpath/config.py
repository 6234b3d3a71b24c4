"""
Runtime configuration for LearnPath.

Values come from the environment (or a .env file in the working directory).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


DEFAULT_DATA_DIR = Path.home() / ".learnpath"
DEFAULT_DB_PATH = DEFAULT_DATA_DIR / "learnpath.db"

DB_PATH = Path(os.getenv("LEARNPATH_DB", str(DEFAULT_DB_PATH)))
LOG_LEVEL = os.getenv("LEARNPATH_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

# Course YAML used by the app to seed an empty database
_course_file = os.getenv("LEARNPATH_COURSE_FILE", "")
COURSE_FILE = Path(_course_file) if _course_file else None

STUDENT_ID = os.getenv("LEARNPATH_STUDENT_ID", "default")  # single-learner mode
