"""Tests for the Streamlit course player, run headless with AppTest."""

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from streamlit.testing.v1 import AppTest

from learnpath import config
from learnpath.classroom import (
    PersistenceError,
    ProgressTracker,
    SQLiteStore,
    load_course_file,
    seed_store,
)
from learnpath.schemas import Enrollment

ROOT = Path(__file__).parent.parent
COURSE_FILE = ROOT / "courses" / "python-101.yaml"
ENROLLMENT_ID = "tester:python-101"


async def prepare(store: SQLiteStore, completed: list[str]):
    await seed_store(store, load_course_file(COURSE_FILE))
    await store.create_enrollment(
        Enrollment(id=ENROLLMENT_ID, course_id="python-101", student_id="tester")
    )
    tracker = ProgressTracker(store)
    for lesson_id in completed:
        await tracker.record_lesson_complete(ENROLLMENT_ID, lesson_id)


@pytest.fixture
def app_store(tmp_path, monkeypatch):
    db_path = tmp_path / "app.db"
    monkeypatch.setattr(config, "DB_PATH", db_path)
    monkeypatch.setattr(config, "COURSE_FILE", COURSE_FILE)
    monkeypatch.setattr(config, "STUDENT_ID", "tester")
    return SQLiteStore(db_path)


def start_app() -> AppTest:
    at = AppTest.from_file(str(ROOT / "app.py"), default_timeout=30)
    at.run()
    assert not at.exception
    return at


class TestVideoLesson:
    """Test watch position reporting from the video view."""

    def test_saved_position_is_stored(self, app_store):
        asyncio.run(prepare(app_store, completed=[]))
        at = start_app()
        assert at.session_state["navigator"].current.lesson.id == "welcome"

        at.slider(key="watch_position_welcome").set_value(3)
        at.button(key="save_watch_position").click()
        at.run()
        assert not at.exception

        records = asyncio.run(app_store.get_lesson_progress(ENROLLMENT_ID))
        assert len(records) == 1
        assert records[0].watched_duration_seconds == 180
        assert not records[0].is_completed


class TestQuizLesson:
    """Test quiz completion when saving progress fails."""

    def test_save_failure_message_survives_rerun(self, app_store, monkeypatch):
        asyncio.run(prepare(app_store, completed=["welcome", "values-and-names"]))
        at = start_app()
        nav = at.session_state["navigator"]
        assert nav.current.lesson.id == "values-check"

        monkeypatch.setattr(
            ProgressTracker,
            "record_lesson_complete",
            AsyncMock(side_effect=PersistenceError("offline")),
        )

        for question_id, choice in [("q-type-int", 0), ("q-type-str", 2), ("q-rebind", 1)]:
            at.radio(key=f"answer_values-check-quiz_{question_id}").set_value(choice).run()
            at.button(key="quiz_advance").click().run()
            assert not at.exception

        nav = at.session_state["navigator"]
        assert nav.session.is_completed
        assert nav.session.result.score == 100
        assert nav.has_pending_completion
        assert any("saving progress failed" in error.value for error in at.error)
