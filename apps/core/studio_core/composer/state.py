"""ComposerState — the controller behind the compose screen.

Holds what the user is composing (input mode, text, URLs, images and
tone/style options) plus the request lifecycle: a loading flag that
blocks re-submission, an error banner, and the last generated content.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from studio_core.extraction.errors import UrlFetchError
from studio_core.llm.errors import ContentGenerationError
from studio_core.models.content import GeneratedContent
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
)

if TYPE_CHECKING:
    from studio_core.extraction.fetcher import UrlFetcher
    from studio_core.llm.client import ContentGenerator

logger = logging.getLogger(__name__)

INVALID_INPUT_MESSAGE = "Please provide valid input to analyze."


class View(str, Enum):
    HOME = "home"
    EXPLORE = "explore"
    NOTIFICATIONS = "notifications"
    HISTORY = "history"
    PROFILE = "profile"


class SubmissionError(Exception):
    """The composed input cannot be submitted."""


class AnalysisInProgressError(Exception):
    """A generation request is already in flight."""


def submission_error(request: AnalysisRequest) -> str | None:
    """Why `request` cannot be analyzed, or None if it can."""
    if isinstance(request, TextAnalysisRequest):
        if not request.text.strip():
            return "Text input is empty."
    elif isinstance(request, ImageAnalysisRequest):
        if not request.images:
            return "At least one image is required."
    elif isinstance(request, UrlAnalysisRequest):
        if not request.urls:
            return "At least one URL is required."
        if not request.usable_urls:
            return "None of the URLs have extracted content."
    return None


@dataclass
class ComposerState:
    view: View = View.HOME
    input_type: InputType = InputType.TEXT
    text: str = ""
    urls: list[UrlContent] = field(default_factory=list)
    images: list[ImageData] = field(default_factory=list)
    tone: Tone = Tone.PROFESSIONAL
    style: Style = Style.LINKEDIN
    word_count: int | None = None

    is_loading: bool = False
    error: str | None = None
    generated_content: GeneratedContent | None = None

    # ── Input editing ───────────────────────────────

    def set_input_type(self, input_type: InputType) -> None:
        self.input_type = input_type
        self.error = None

    def add_image(self, image: ImageData) -> None:
        self.images = [i for i in self.images if i.name != image.name] + [image]

    def remove_image(self, name: str) -> None:
        self.images = [i for i in self.images if i.name != name]

    def remove_url(self, url: str) -> None:
        self.urls = [u for u in self.urls if u.url != url]

    def _put_url(self, entry: UrlContent) -> None:
        for i, existing in enumerate(self.urls):
            if existing.url == entry.url:
                self.urls[i] = entry
                return
        self.urls.append(entry)

    async def add_url(self, url: str, fetcher: UrlFetcher) -> UrlContent:
        """Add a URL and fetch its content; failures mark the entry as errored."""
        url = url.strip()
        self._put_url(UrlContent(url=url, status=UrlStatus.LOADING))
        try:
            page = await fetcher.fetch(url)
        except UrlFetchError as e:
            logger.warning("Could not fetch %s: %s", url, e)
            entry = UrlContent(url=url, status=UrlStatus.ERROR, error=str(e))
        else:
            entry = UrlContent(
                url=url, status=UrlStatus.SUCCESS, title=page.title, content=page.content
            )
        self._put_url(entry)
        return entry

    # ── Submission ──────────────────────────────────

    def is_analyze_disabled(self) -> bool:
        if self.is_loading:
            return True
        if self.input_type == InputType.TEXT:
            return not self.text.strip()
        if self.input_type == InputType.IMAGE:
            return not self.images
        if self.input_type == InputType.URL:
            return not self.urls or all(u.status == UrlStatus.ERROR for u in self.urls)
        return True

    def build_request(self) -> AnalysisRequest:
        options = {"tone": self.tone, "style": self.style, "word_count": self.word_count}
        request: AnalysisRequest
        if self.input_type == InputType.TEXT:
            request = TextAnalysisRequest(text=self.text, **options)
        elif self.input_type == InputType.IMAGE:
            request = ImageAnalysisRequest(images=list(self.images), **options)
        elif self.input_type == InputType.URL:
            request = UrlAnalysisRequest(urls=list(self.urls), **options)
        else:
            raise SubmissionError("Invalid input type")

        reason = submission_error(request)
        if reason:
            raise SubmissionError(reason)
        return request

    async def analyze(
        self, generator: ContentGenerator, *, with_hashtags: bool = True
    ) -> GeneratedContent | None:
        """Run one generation request.

        Returns the generated content, or None when the provider call failed;
        in that case `error` holds the banner text.

        Raises:
            AnalysisInProgressError: a previous request is still loading.
            SubmissionError: the input is empty or otherwise not submittable.
        """
        if self.is_loading:
            raise AnalysisInProgressError("An analysis is already in progress.")
        if self.is_analyze_disabled():
            self.error = INVALID_INPUT_MESSAGE
            raise SubmissionError(INVALID_INPUT_MESSAGE)
        try:
            request = self.build_request()
        except SubmissionError as e:
            self.error = str(e)
            raise

        self.is_loading = True
        self.error = None
        self.generated_content = None
        self.view = View.HOME
        try:
            result = await generator.repurpose(request, with_hashtags=with_hashtags)
        except ContentGenerationError as e:
            logger.error("Analysis failed: %s", e)
            self.error = f"Failed to analyze content. {e}"
            return None
        finally:
            self.is_loading = False

        self.generated_content = result
        return result
