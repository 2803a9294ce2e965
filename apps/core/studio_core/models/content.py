"""Generated content records — model output, saved history items, trends."""

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import Field, field_validator

from studio_core.models.base import CamelModel

# History previews collapse summaries longer than this
SUMMARY_PREVIEW_CHARS = 200


class GeneratedContent(CamelModel):
    """Structured output of one analysis call.

    Both lists must be non-empty; a model response that returns an empty
    list fails validation instead of producing a half-filled post.
    """

    summary: str
    key_insights: list[str] = Field(min_length=1)
    interesting_facts: list[str] = Field(min_length=1)
    hashtags: list[str] | None = None

    @field_validator("summary")
    @classmethod
    def summary_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("summary must not be empty")
        return v.strip()


class SavedContent(GeneratedContent):
    """A GeneratedContent snapshot persisted to a user's history."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    created_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    @classmethod
    def from_generated(cls, content: GeneratedContent) -> "SavedContent":
        fields = set(GeneratedContent.model_fields)
        return cls(**content.model_dump(include=fields))

    @property
    def created_at_dt(self) -> datetime:
        return datetime.fromisoformat(self.created_at)

    @property
    def is_clamped(self) -> bool:
        """Whether the history list should show a collapsed preview."""
        return len(self.summary) > SUMMARY_PREVIEW_CHARS


class TrendTopic(CamelModel):
    """One entry of the "What's happening" panel."""

    category: str
    title: str
    posts: str
