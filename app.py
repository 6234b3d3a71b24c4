"""
LearnPath - Course player with quizzes and progress tracking.

Streamlit application for taking a course's lessons in order: videos,
reading material and quizzes, with completion saved per learner.

Usage:
    LEARNPATH_COURSE_FILE=courses/python-101.yaml streamlit run app.py
"""

import asyncio
import logging

import streamlit as st

from learnpath import config
from learnpath.classroom import (
    LessonNavigator,
    PersistenceError,
    ProgressTracker,
    QuizAvailability,
    SQLiteStore,
    load_course_file,
    seed_store,
)
from learnpath.schemas import Enrollment, LessonType
from learnpath.viewer import (
    get_quiz_css,
    option_letter,
    render_course_progress,
    render_empty_quiz,
    render_missing_quiz,
    render_question,
    render_results,
)


logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="LearnPath",
    page_icon="🎓",
    layout="wide",
    initial_sidebar_state="expanded",
)


def run(coro):
    """Run a store/navigator coroutine from Streamlit's synchronous script."""
    return asyncio.run(coro)


# -----------------------------------------------------------------------------
# Session State Initialization
# -----------------------------------------------------------------------------

async def open_course(store: SQLiteStore) -> LessonNavigator:
    """Seed the course file, ensure an enrollment and open the resume lesson."""
    bundle = load_course_file(config.COURSE_FILE)
    await seed_store(store, bundle)

    course_id = bundle.course.id
    enrollment = await store.find_enrollment(course_id, config.STUDENT_ID)
    if enrollment is None:
        enrollment = Enrollment(
            id=f"{config.STUDENT_ID}:{course_id}",
            course_id=course_id,
            student_id=config.STUDENT_ID,
        )
        await store.create_enrollment(enrollment)

    navigator = LessonNavigator(store, ProgressTracker(store), enrollment.id, course_id)
    await navigator.load()
    lesson_id = await navigator.recommended_lesson_id()
    if lesson_id:
        await navigator.open_lesson(lesson_id)
    return navigator


def init_session_state():
    """Initialize session state variables."""
    if "navigator" in st.session_state:
        return

    st.session_state.navigator = None
    st.session_state.course_title = None
    if config.COURSE_FILE is None:
        return

    store = SQLiteStore(config.DB_PATH)
    st.session_state.navigator = run(open_course(store))
    course = run(store.get_course(st.session_state.navigator.course_id))
    st.session_state.course_title = course.title if course else None


# -----------------------------------------------------------------------------
# Sidebar: Lesson List
# -----------------------------------------------------------------------------

def render_sidebar():
    """Render the sidebar with lesson list and progress."""
    st.sidebar.title("🎓 LearnPath")
    nav = st.session_state.navigator
    if not nav:
        return

    if st.session_state.course_title:
        st.sidebar.subheader(st.session_state.course_title)

    summary = run(nav.tracker.get_summary(nav.enrollment_id))
    st.sidebar.markdown(render_course_progress(summary), unsafe_allow_html=True)
    st.sidebar.divider()

    completed = set(summary.completed_lesson_ids)
    current_id = nav.current.lesson.id if nav.current else None

    for lesson in nav.lessons:
        if lesson.id in completed:
            indicator = "✓"
        elif lesson.id == current_id:
            indicator = "→"
        else:
            indicator = "○"

        label = f"{indicator} {lesson.title}"
        if st.sidebar.button(label, key=f"lesson_{lesson.id}", use_container_width=True):
            select_lesson(lesson.id)


def select_lesson(lesson_id: str):
    """Open a lesson; any quiz attempt in progress is abandoned."""
    run(st.session_state.navigator.open_lesson(lesson_id))
    st.rerun()


# -----------------------------------------------------------------------------
# Main Content: Lesson View
# -----------------------------------------------------------------------------

def render_lesson_view():
    """Render the current lesson."""
    nav = st.session_state.navigator
    if not nav:
        st.error("No course configured.")
        st.code("""
# Point the app at a course file:
export LEARNPATH_COURSE_FILE=courses/python-101.yaml
streamlit run app.py
        """)
        return

    view = nav.current
    if view is None:
        st.info("This course has no lessons yet.")
        return

    render_navigation_bar()

    flash_error = st.session_state.pop("flash_error", None)
    if flash_error:
        st.error(flash_error)

    lesson = view.lesson
    st.header(lesson.title)
    meta = [lesson.type.value]
    if lesson.duration_minutes:
        meta.append(f"{lesson.duration_minutes} min")
    st.caption(" · ".join(meta))
    if lesson.description:
        st.markdown(lesson.description)

    if lesson.type == LessonType.VIDEO:
        render_video_lesson()
    elif lesson.type == LessonType.QUIZ:
        render_quiz_lesson()
    else:
        render_text_lesson()

    render_retry_section()


def render_navigation_bar():
    """Render navigation bar with prev/next buttons."""
    nav = st.session_state.navigator
    view = nav.current

    col1, col2, col3 = st.columns([1, 2, 1])

    with col1:
        if st.button("← Previous", use_container_width=True, disabled=not nav.has_previous):
            run(nav.previous_lesson())
            st.rerun()

    with col2:
        st.markdown(f"<center>Lesson {view.position} of {view.total}</center>", unsafe_allow_html=True)

    with col3:
        if st.button("Next →", use_container_width=True, disabled=not nav.has_next):
            run(nav.next_lesson())
            st.rerun()

    st.divider()


def complete_current(action) -> bool:
    """
    Run a completion coroutine, reporting store failures to the learner.

    Returns True if the write succeeded.
    """
    try:
        run(action)
    except PersistenceError:
        st.error("Failed to save your progress. You can try again below.")
        return False
    return True


def render_completion_section():
    nav = st.session_state.navigator
    lesson_id = nav.current.lesson.id
    if run(nav.tracker.is_lesson_completed(nav.enrollment_id, lesson_id)):
        st.success("Lesson completed!")
    elif st.button("Mark lesson as complete", type="primary", use_container_width=True):
        if complete_current(nav.mark_complete()):
            st.rerun()


def render_text_lesson():
    lesson = st.session_state.navigator.current.lesson
    st.markdown(lesson.content or "_This lesson has no content yet._")
    st.divider()
    render_completion_section()


def render_video_lesson():
    nav = st.session_state.navigator
    lesson = nav.current.lesson
    if lesson.video_url:
        st.video(lesson.video_url)

    # st.video has no playback callback; the learner reports their position
    max_minutes = lesson.duration_minutes or 60
    col1, col2 = st.columns([3, 1])
    with col1:
        minutes = st.slider(
            "Watched so far (minutes)",
            min_value=0,
            max_value=max_minutes,
            key=f"watch_position_{lesson.id}",
        )
    with col2:
        if st.button("Save position", key="save_watch_position", use_container_width=True):
            if complete_current(nav.on_video_progress(minutes * 60)):
                st.toast(f"Saved position at {minutes} min")

    if st.button("I've finished watching", key="video_ended", use_container_width=True):
        if complete_current(nav.on_video_ended()):
            st.rerun()

    if lesson.content:
        st.markdown(lesson.content)
    st.divider()
    render_completion_section()


def render_quiz_lesson():
    nav = st.session_state.navigator
    view = nav.current
    st.markdown(get_quiz_css(), unsafe_allow_html=True)

    if view.quiz_availability == QuizAvailability.MISSING:
        st.markdown(render_missing_quiz(view.lesson.title), unsafe_allow_html=True)
        return
    if view.quiz_availability == QuizAvailability.EMPTY:
        st.markdown(render_empty_quiz(), unsafe_allow_html=True)
        return

    session = view.session
    if session.is_completed:
        st.markdown(render_results(session.result), unsafe_allow_html=True)
        if st.button("Retake Quiz"):
            nav.retake_quiz()
            st.rerun()
        return

    st.markdown(render_question(session), unsafe_allow_html=True)

    question = session.current_question
    remaining = session.remaining_seconds()
    if remaining is not None:
        st.caption(f"Suggested time remaining: {remaining // 60}:{remaining % 60:02d}")

    choice = st.radio(
        "Your answer",
        options=list(range(len(question.options))),
        format_func=lambda idx: f"{option_letter(idx)}. {question.options[idx]}",
        index=session.selected_option,
        key=f"answer_{session.quiz.id}_{question.id}",
    )
    if choice is not None and choice != session.selected_option:
        nav.select_answer(choice)
        st.rerun()

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Previous", disabled=not session.can_retreat, use_container_width=True):
            nav.retreat_quiz()
            st.rerun()
    with col2:
        label = "Complete Quiz" if session.is_last_question else "Next Question"
        if st.button(label, key="quiz_advance", type="primary",
                     disabled=not session.can_advance, use_container_width=True):
            try:
                result = run(nav.advance_quiz())
                if result:
                    st.toast(f"Quiz completed with {result.score}% score!")
            except PersistenceError:
                # Shown after the rerun by render_lesson_view
                st.session_state.flash_error = (
                    "Your score is shown below, but saving progress failed. You can try again."
                )
            st.rerun()


def render_retry_section():
    nav = st.session_state.navigator
    if not nav.has_pending_completion:
        return
    st.warning("Your last completion was not saved.")
    if st.button("Retry saving progress", key="retry_completion"):
        if complete_current(nav.retry_completion()):
            st.rerun()


# -----------------------------------------------------------------------------
# Main App
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    init_session_state()
    render_sidebar()
    render_lesson_view()


if __name__ == "__main__":
    main()
