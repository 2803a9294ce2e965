"""Generative-AI client: prompts, JSON schemas and response validation."""

from studio_core.llm.client import ContentGenerator
from studio_core.llm.errors import ContentFormatError, ContentGenerationError

__all__ = ["ContentFormatError", "ContentGenerationError", "ContentGenerator"]
