"""
Quiz renderer - Question, results and progress display.

Provides:
- Question card for the presenting state
- Results card with per-question review
- Notices for missing or empty quizzes
- Course progress bar
"""

import html
from typing import Optional

from learnpath.classroom import QuizResult, QuizSession
from learnpath.schemas import CourseProgressSummary


def get_quiz_css() -> str:
    """Get CSS styles for quiz display."""
    return """
    <style>
    .quiz-container {
        background: #e3f2fd;
        border-radius: 12px;
        padding: 1.5em;
        margin: 1.5em 0;
        border-left: 4px solid #1976D2;
    }
    .quiz-header {
        display: flex;
        justify-content: space-between;
        align-items: center;
        margin-bottom: 1em;
    }
    .quiz-title {
        font-weight: 600;
        color: #1565C0;
        font-size: 1.1em;
    }
    .quiz-progress-label {
        color: #666;
        font-size: 0.9em;
    }
    .quiz-question {
        font-size: 1.05em;
        color: #333;
        margin-bottom: 1em;
        line-height: 1.6;
    }
    .quiz-option {
        background: white;
        border: 2px solid #ddd;
        border-radius: 8px;
        padding: 0.6em 1em;
        margin: 0.4em 0;
    }
    .quiz-option.selected {
        border-color: #1976D2;
    }
    .quiz-option-letter {
        font-weight: 600;
        color: #1976D2;
        margin-right: 0.5em;
    }
    .quiz-score-box {
        background: #e8f5e9;
        border-radius: 8px;
        padding: 1em;
        margin-top: 1.5em;
        text-align: center;
    }
    .quiz-score-value {
        font-size: 2em;
        font-weight: 700;
    }
    .quiz-score-value.excellent { color: #388E3C; }
    .quiz-score-value.good { color: #F57C00; }
    .quiz-score-value.low { color: #D32F2F; }
    .quiz-score-label {
        color: #666;
        font-size: 0.9em;
    }
    .quiz-review-item {
        border: 1px solid #ddd;
        border-radius: 8px;
        padding: 1em;
        margin-top: 0.8em;
    }
    .quiz-review-answer { font-size: 0.95em; color: #666; }
    .quiz-review-correct { font-size: 0.95em; color: #388E3C; }
    .quiz-explanation {
        background: #f5f5f5;
        padding: 0.6em 0.8em;
        border-radius: 6px;
        font-size: 0.9em;
        margin-top: 0.5em;
    }
    .quiz-notice {
        text-align: center;
        color: #666;
        padding: 2em;
    }
    .course-progress-bar {
        background: #eee;
        border-radius: 6px;
        height: 10px;
        overflow: hidden;
    }
    .course-progress-fill {
        background: #1976D2;
        height: 100%;
    }
    </style>
    """


def option_letter(index: int) -> str:
    """A, B, C, ... for option indices."""
    return chr(ord("A") + index)


def score_band(score: int) -> tuple[str, str]:
    """
    Feedback band for a score.

    Returns:
        (css class, message)
    """
    if score >= 80:
        return "excellent", "Excellent work!"
    if score >= 60:
        return "good", "Good job!"
    return "low", "Keep studying!"


def render_question(session: QuizSession) -> str:
    """
    Render the current question of a session in progress.

    Returns an empty string once the session is completed.
    """
    question = session.current_question
    if question is None:
        return ""

    current, total = session.position
    selected = session.selected_option

    parts = ['<div class="quiz-container">']

    # Header
    parts.append('<div class="quiz-header">')
    parts.append(f'<span class="quiz-title">Question {current} of {total}</span>')
    parts.append(f'<span class="quiz-progress-label">{session.progress_percent}%</span>')
    parts.append('</div>')

    parts.append(f'<div class="quiz-question">{html.escape(question.question)}</div>')

    for idx, option in enumerate(question.options):
        css = "quiz-option selected" if idx == selected else "quiz-option"
        parts.append(
            f'<div class="{css}"><span class="quiz-option-letter">{option_letter(idx)}.</span>'
            f'{html.escape(option)}</div>'
        )

    parts.append('</div>')
    return ''.join(parts)


def render_quiz_score(result: QuizResult) -> str:
    """Render quiz score display."""
    band, message = score_band(result.score)
    verdict = "Passed" if result.passed else f"Passing score: {result.passing_score}%"
    return f"""
    <div class="quiz-score-box">
        <div class="quiz-score-value {band}">{result.score}%</div>
        <div class="quiz-score-label">You answered {result.correct_count} out of {result.total} questions correctly</div>
        <div class="quiz-score-label">{message} {verdict}</div>
    </div>
    """


def render_review(result: QuizResult) -> str:
    """Render per-question review of a completed attempt."""
    parts = []
    for review in result.reviews:
        question = review.question
        mark = "&#10003;" if review.is_correct else "&#10007;"
        parts.append('<div class="quiz-review-item">')
        parts.append(f'<div class="quiz-question">{mark} {html.escape(question.question)}</div>')

        answer = review.selected_option
        answer_text = html.escape(answer) if answer is not None else "<em>Not answered</em>"
        parts.append(f'<div class="quiz-review-answer">Your answer: {answer_text}</div>')

        if not review.is_correct:
            parts.append(
                f'<div class="quiz-review-correct">Correct answer: {html.escape(question.correct_option)}</div>'
            )
        if question.explanation:
            parts.append(f'<div class="quiz-explanation">{html.escape(question.explanation)}</div>')
        parts.append('</div>')
    return ''.join(parts)


def render_results(result: QuizResult) -> str:
    """Render score and review for a completed attempt."""
    return render_quiz_score(result) + render_review(result)


def render_quiz_notice(title: str, message: str) -> str:
    """Render a notice in place of a quiz that cannot be taken."""
    return (
        f'<div class="quiz-container quiz-notice"><div class="quiz-title">{html.escape(title)}</div>'
        f'<p>{html.escape(message)}</p></div>'
    )


def render_empty_quiz() -> str:
    return render_quiz_notice(
        "No Quiz Available",
        "This quiz hasn't been set up yet. Please contact your instructor.",
    )


def render_missing_quiz(lesson_title: Optional[str] = None) -> str:
    subject = f'"{lesson_title}"' if lesson_title else "this lesson"
    return render_quiz_notice("Quiz Not Found", f"No quiz is attached to {subject}.")


def render_course_progress(summary: CourseProgressSummary) -> str:
    """Render completed/total lessons with a progress bar."""
    return f"""
    <div class="quiz-score-label">Progress: {summary.completed}/{summary.total_lessons} lessons ({summary.completion_percent}%)</div>
    <div class="course-progress-bar"><div class="course-progress-fill" style="width: {summary.completion_percent}%"></div></div>
    """
