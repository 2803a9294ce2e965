"""Best-effort main-content extraction from arbitrary HTML."""

import re
from dataclasses import dataclass

from bs4 import BeautifulSoup

NON_CONTENT_TAGS = ["script", "style", "nav", "header", "footer", "iframe", "noscript"]

# Checked in order; the first selector that matches wins
CONTENT_SELECTORS = [
    "article",
    "main",
    '[role="main"]',
    ".post-content",
    ".article-content",
    ".entry-content",
    ".content",
    "#content",
]

MIN_CONTENT_CHARS = 100
DEFAULT_MAX_CHARS = 5000
TRUNCATION_MARKER = "..."
UNTITLED = "Untitled"
NO_CONTENT_PLACEHOLDER = "No content could be extracted from this page."

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ExtractedPage:
    title: str
    content: str


def _clean(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def _extract_title(soup: BeautifulSoup) -> str:
    if soup.title and (title := _clean(soup.title.get_text())):
        return title
    h1 = soup.find("h1")
    if h1 and (title := _clean(h1.get_text(" "))):
        return title
    og = soup.find("meta", attrs={"property": "og:title"})
    if og and (title := _clean(og.get("content") or "")):
        return title
    return UNTITLED


def extract_main_content(html: str, max_chars: int = DEFAULT_MAX_CHARS) -> ExtractedPage:
    """Pull a title and the main readable text out of an HTML page.

    Never raises on odd markup: when nothing usable is found the content is
    a placeholder string and the title is "Untitled".
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(NON_CONTENT_TAGS):
        tag.decompose()

    title = _extract_title(soup)

    content = ""
    for selector in CONTENT_SELECTORS:
        element = soup.select_one(selector)
        if element is not None:
            content = _clean(element.get_text(" "))
            break

    if len(content) < MIN_CONTENT_CHARS:
        body = soup.body or soup
        content = _clean(body.get_text(" "))

    if len(content) > max_chars:
        content = content[:max_chars] + TRUNCATION_MARKER

    return ExtractedPage(title=title, content=content or NO_CONTENT_PLACEHOLDER)
