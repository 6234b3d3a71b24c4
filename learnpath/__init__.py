"""LearnPath - quiz sessions and progress tracking for online courses."""

__version__ = "0.1.0"
