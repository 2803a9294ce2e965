"""Compose-screen state: input mode, loading flag, error banner, output."""

from studio_core.composer.state import (
    INVALID_INPUT_MESSAGE,
    AnalysisInProgressError,
    ComposerState,
    SubmissionError,
    View,
    submission_error,
)

__all__ = [
    "INVALID_INPUT_MESSAGE",
    "AnalysisInProgressError",
    "ComposerState",
    "SubmissionError",
    "View",
    "submission_error",
]
