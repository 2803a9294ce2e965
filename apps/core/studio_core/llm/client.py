"""ContentGenerator — typed wrapper around an OpenAI-compatible provider.

Every call asks for structured output with a fixed JSON schema, then
validates the answer with pydantic. A response that does not match the
expected shape raises ContentFormatError; nothing partial is returned.
"""

from __future__ import annotations

import logging
from typing import Any

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, Field, ValidationError

from studio_core.llm.errors import ContentFormatError, ContentGenerationError
from studio_core.llm.prompts import (
    TRENDS_PROMPT,
    build_analysis_prompt,
    build_hashtag_prompt,
)
from studio_core.llm.schemas import (
    ANALYSIS_SCHEMA,
    HASHTAGS_SCHEMA,
    TRENDS_SCHEMA,
    response_format,
)
from studio_core.models.content import GeneratedContent, TrendTopic
from studio_core.models.inputs import AnalysisRequest, ImageAnalysisRequest

logger = logging.getLogger(__name__)

MAX_TRENDS = 5


class _HashtagsPayload(BaseModel):
    hashtags: list[str]


class _TrendsPayload(BaseModel):
    trends: list[TrendTopic] = Field(min_length=1)


def strip_code_fences(raw: str) -> str:
    """Remove a markdown code fence some providers wrap JSON in."""
    raw = raw.strip()
    if raw.startswith("```"):
        raw = raw.split("\n", 1)[1] if "\n" in raw else raw[3:]
    if raw.endswith("```"):
        raw = raw[:-3]
    return raw.strip()


def normalize_hashtags(tags: list[str]) -> list[str]:
    """Lower-case, prefix with '#', drop blanks, inner spaces and duplicates."""
    seen: list[str] = []
    for tag in tags:
        tag = "".join(tag.split()).lstrip("#").lower()
        if not tag:
            continue
        tag = f"#{tag}"
        if tag not in seen:
            seen.append(tag)
    return seen


class ContentGenerator:
    """Generate repurposed content through a structured-output model.

    Usage:
        generator = ContentGenerator(AsyncOpenAI(...), "gpt-4o", "gpt-4o-mini")
        content = await generator.repurpose(request)
    """

    def __init__(self, llm: AsyncOpenAI, model: str, fast_model: str) -> None:
        self._llm = llm
        self._model = model
        self._fast_model = fast_model

    async def close(self) -> None:
        await self._llm.close()

    async def _complete(
        self,
        *,
        model: str,
        content: str | list[dict[str, Any]],
        schema_name: str,
        schema: dict[str, Any],
        temperature: float,
    ) -> str:
        try:
            response = await self._llm.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": content}],
                response_format=response_format(schema_name, schema),
                temperature=temperature,
            )
        except OpenAIError as e:
            logger.error("LLM call failed (%s): %s", schema_name, e, exc_info=True)
            raise ContentGenerationError(
                f"Failed to get a valid response from the model: {e}"
            ) from e

        if not response.choices:
            raise ContentFormatError("Model returned no choices.")
        message = response.choices[0].message
        refusal = getattr(message, "refusal", None)
        if refusal:
            raise ContentGenerationError(f"Model refused the request: {refusal}")
        raw = message.content or ""
        if not raw.strip():
            raise ContentFormatError("Model returned an empty response.")
        return strip_code_fences(raw)

    @staticmethod
    def _parse(raw: str, model_cls: type[BaseModel], what: str) -> Any:
        try:
            return model_cls.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("%s response failed validation: %s", what, e)
            raise ContentFormatError(
                "API response does not match the expected format."
            ) from e

    # ──────────────────────────────────────────────
    # Analysis
    # ──────────────────────────────────────────────

    async def analyze(self, request: AnalysisRequest) -> GeneratedContent:
        """Summary, key insights and interesting facts for one request."""
        prompt = build_analysis_prompt(request)

        content: str | list[dict[str, Any]] = prompt
        if isinstance(request, ImageAnalysisRequest):
            content = [{"type": "text", "text": prompt}] + [
                {"type": "image_url", "image_url": {"url": img.data_url}}
                for img in request.images
            ]

        raw = await self._complete(
            model=self._model,
            content=content,
            schema_name="analysis",
            schema=ANALYSIS_SCHEMA,
            temperature=0.7,
        )
        result = self._parse(raw, GeneratedContent, "Analysis")
        logger.info(
            "Analysis (%s, %s/%s): %d chars, %d insights, %d facts",
            request.type,
            request.style.value,
            request.tone.value,
            len(result.summary),
            len(result.key_insights),
            len(result.interesting_facts),
        )
        # Hashtags come from their own call; ignore any the model volunteered
        return result.model_copy(update={"hashtags": None})

    # ──────────────────────────────────────────────
    # Hashtags
    # ──────────────────────────────────────────────

    async def generate_hashtags(self, content: GeneratedContent) -> list[str]:
        raw = await self._complete(
            model=self._fast_model,
            content=build_hashtag_prompt(content),
            schema_name="hashtags",
            schema=HASHTAGS_SCHEMA,
            temperature=0.5,
        )
        payload = self._parse(raw, _HashtagsPayload, "Hashtags")
        return normalize_hashtags(payload.hashtags)

    # ──────────────────────────────────────────────
    # Trending topics
    # ──────────────────────────────────────────────

    async def trending_topics(self) -> list[TrendTopic]:
        raw = await self._complete(
            model=self._fast_model,
            content=TRENDS_PROMPT,
            schema_name="trending_topics",
            schema=TRENDS_SCHEMA,
            temperature=0.9,
        )
        payload = self._parse(raw, _TrendsPayload, "Trends")
        return payload.trends[:MAX_TRENDS]

    # ──────────────────────────────────────────────
    # Full pipeline
    # ──────────────────────────────────────────────

    async def repurpose(
        self, request: AnalysisRequest, *, with_hashtags: bool = True
    ) -> GeneratedContent:
        """Analyze, then attach hashtags.

        Hashtags are optional output: if that call fails the analysis is
        still returned with `hashtags=None`.
        """
        content = await self.analyze(request)
        if not with_hashtags:
            return content
        try:
            tags = await self.generate_hashtags(content)
        except ContentGenerationError:
            logger.warning("Hashtag generation failed, returning analysis only", exc_info=True)
            return content
        return content.model_copy(update={"hashtags": tags or None})

