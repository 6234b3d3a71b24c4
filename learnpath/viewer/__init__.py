"""
LearnPath Viewer - Rendering components for lesson display.

This module provides:
- Quiz question and results display
- Quiz unavailable notices
- Course progress bar
"""

from .quiz import (
    get_quiz_css,
    option_letter,
    score_band,
    render_question,
    render_quiz_score,
    render_review,
    render_results,
    render_quiz_notice,
    render_empty_quiz,
    render_missing_quiz,
    render_course_progress,
)

__all__ = [
    "get_quiz_css",
    "option_letter",
    "score_band",
    "render_question",
    "render_quiz_score",
    "render_review",
    "render_results",
    "render_quiz_notice",
    "render_empty_quiz",
    "render_missing_quiz",
    "render_course_progress",
]
