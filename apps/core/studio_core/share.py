"""Format generated content as ready-to-paste posts and build share links."""

from urllib.parse import urlencode

from studio_core.models.content import GeneratedContent
from studio_core.models.inputs import Style

DEFAULT_HASHTAGS = ["#ContentCreation", "#Insights", "#KnowledgeSharing"]
TWEET_LIMIT = 280

LINKEDIN_SHARE_URL = "https://www.linkedin.com/feed/?shareActive=true"
X_INTENT_URL = "https://twitter.com/intent/tweet"


def _hashtags(content: GeneratedContent) -> str:
    return " ".join(content.hashtags or DEFAULT_HASHTAGS)


def _linkedin(content: GeneratedContent) -> str:
    insights = "\n".join(f"🔹 {i}" for i in content.key_insights)
    facts = "\n".join(f"💡 {f}" for f in content.interesting_facts)
    return (
        f"{content.summary}\n\n---\n\n"
        f"**Key Insights:**\n{insights}\n\n"
        f"**Interesting Facts:**\n{facts}\n\n"
        f"{_hashtags(content)}"
    )


def _tweet(content: GeneratedContent) -> str:
    tags = _hashtags(content)
    room = TWEET_LIMIT - len(tags) - 1
    summary = content.summary
    if len(summary) > room:
        summary = summary[: max(room - 1, 0)].rstrip() + "…"
    return f"{summary} {tags}"


def _thread(content: GeneratedContent) -> str:
    posts = [content.summary]
    posts += [f"🔹 {i}" for i in content.key_insights]
    posts += [f"💡 {f}" for f in content.interesting_facts]
    posts[-1] = f"{posts[-1]}\n\n{_hashtags(content)}"
    total = len(posts)
    return "\n\n".join(f"{n}/{total} {p}" for n, p in enumerate(posts, 1))


def _instagram(content: GeneratedContent) -> str:
    bullets = "\n".join(f"✨ {i}" for i in content.key_insights)
    return f"{content.summary}\n\n{bullets}\n.\n.\n.\n{_hashtags(content)}"


_FORMATTERS = {
    Style.LINKEDIN: _linkedin,
    Style.TWITTER: _tweet,
    Style.THREAD: _thread,
    Style.INSTAGRAM: _instagram,
}


def format_post(content: GeneratedContent, style: Style = Style.LINKEDIN) -> str:
    """Render content as a post for the given platform style."""
    return _FORMATTERS[style](content).strip()


def share_url(style: Style, text: str) -> str | None:
    """Where to send the user after copying the post.

    LinkedIn has no prefill parameter, so the text goes through the
    clipboard; X accepts it in the intent URL. Instagram has no web composer.
    """
    if style == Style.LINKEDIN:
        return LINKEDIN_SHARE_URL
    if style in (Style.TWITTER, Style.THREAD):
        first_post = text.split("\n\n", 1)[0] if style == Style.THREAD else text
        return f"{X_INTENT_URL}?{urlencode({'text': first_post})}"
    return None
