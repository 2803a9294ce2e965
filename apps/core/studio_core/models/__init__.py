"""Data models for Content Studio."""

from studio_core.models.content import GeneratedContent, SavedContent, TrendTopic
from studio_core.models.inputs import (
    AnalysisRequest,
    ImageAnalysisRequest,
    ImageData,
    InputType,
    Style,
    TextAnalysisRequest,
    Tone,
    UrlAnalysisRequest,
    UrlContent,
    UrlStatus,
    analysis_request_adapter,
)
from studio_core.models.user import User

__all__ = [
    "AnalysisRequest",
    "GeneratedContent",
    "ImageAnalysisRequest",
    "ImageData",
    "InputType",
    "SavedContent",
    "Style",
    "TextAnalysisRequest",
    "Tone",
    "TrendTopic",
    "UrlAnalysisRequest",
    "UrlContent",
    "UrlStatus",
    "User",
    "analysis_request_adapter",
]
