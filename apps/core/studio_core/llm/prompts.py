"""LLM prompt templates for content repurposing.

Prompt types:
1. Analysis — summary + key insights + interesting facts, styled per platform
2. Hashtags — fast model, derived from an analysis result
3. Trending topics — fast model, "What's happening" panel
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from studio_core.models.inputs import (
    ImageAnalysisRequest,
    Style,
    TextAnalysisRequest,
    UrlAnalysisRequest,
)

if TYPE_CHECKING:
    from studio_core.models.content import GeneratedContent
    from studio_core.models.inputs import AnalysisRequest

_STYLE_GUIDANCE: dict[Style, str] = {
    Style.LINKEDIN: (
        "A LinkedIn post: a strong opening line, short paragraphs, "
        "a professional call to action at the end."
    ),
    Style.TWITTER: (
        "A single tweet: at most 280 characters, punchy, no more than one emoji."
    ),
    Style.THREAD: (
        "A Twitter/X thread: 3-6 numbered posts separated by blank lines, "
        "each under 280 characters, the first one a hook."
    ),
    Style.INSTAGRAM: (
        "An Instagram caption: conversational, emoji-friendly, line breaks "
        "between ideas, ending with a question to drive comments."
    ),
}


def _instructions(request: AnalysisRequest) -> str:
    length = ""
    if request.word_count:
        length = f"\n    - The summary should be approximately {request.word_count} words long."
    return f"""\
You are an expert social media content creator. Your task is to analyze the provided content and generate a structured response for a social media post based on the specified style.

**Instructions:**
1. **Style & Formatting:**
    - Your output must be a **'{request.style.value}'**.
    - The tone must be **'{request.tone.value}'**.
    - {_STYLE_GUIDANCE[request.style]}{length}
2. **Output:** Based on all the provided content, generate the following in the required JSON format:
    - **summary:** The main content, formatted according to the instructions above.
    - **keyInsights:** 3-5 key insights or main takeaways from the combined content.
    - **interestingFacts:** 2-3 interesting or surprising facts from across all content.
"""


def build_analysis_prompt(request: AnalysisRequest) -> str:
    """Build the analysis prompt for any input type.

    Image payloads are not inlined; the client attaches them as separate
    message parts and the prompt only refers to them.
    """
    base = _instructions(request)

    if isinstance(request, TextAnalysisRequest):
        return f"{base}\nAnalyze the following text:\n---\n{request.text.strip()}\n---\n"

    if isinstance(request, UrlAnalysisRequest):
        sections = []
        for i, item in enumerate(request.usable_urls, 1):
            title = item.title or "Untitled"
            sections.append(
                f"Source {i}: {title} ({item.url})\n{item.content}"
            )
        joined = "\n\n".join(sections)
        return (
            f"{base}\nAnalyze the content extracted from the following web pages:\n"
            f"---\n{joined}\n---\n"
        )

    if isinstance(request, ImageAnalysisRequest):
        names = ", ".join(img.name for img in request.images)
        return (
            f"{base}\nAnalyze the {len(request.images)} attached image(s) ({names}). "
            "Describe what they show, read any visible text, and treat that as "
            "the source content.\n"
        )

    raise TypeError(f"Unsupported request type: {type(request).__name__}")


def build_hashtag_prompt(content: GeneratedContent) -> str:
    insights = "\n- ".join(content.key_insights)
    return f"""\
Based on the following content, generate 3-5 highly relevant and popular social media hashtags. The hashtags should be concise, lowercase, and directly related to the main topics.

Content:
---
Summary: {content.summary}
Key Insights:
- {insights}
---

Return the hashtags in the specified JSON format."""


TRENDS_PROMPT = """\
Generate a list of exactly 5 current and diverse trending topics suitable for a social media "What's happening" section.
Topics should cover technology, business, AI, and marketing.
For each topic, provide a category (e.g. "AI · Trending"), a concise title (often a hashtag), and a realistic, estimated number of posts (e.g. "125K posts").
Follow the JSON schema exactly.
"""
