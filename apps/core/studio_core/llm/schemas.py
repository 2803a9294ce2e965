"""JSON schemas for structured output, one per request type.

Each schema is wrapped in the `json_schema` response format accepted by
OpenAI-compatible chat-completion endpoints. Strict mode requires every
property to be listed in `required` and `additionalProperties: false`.
"""

from typing import Any


def _string_list(description: str) -> dict[str, Any]:
    return {
        "type": "array",
        "description": description,
        "items": {"type": "string"},
    }


ANALYSIS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "summary": {
            "type": "string",
            "description": "The main post content, formatted for the requested style.",
        },
        "keyInsights": _string_list(
            "3-5 key insights or main takeaways from the content."
        ),
        "interestingFacts": _string_list(
            "2-3 interesting or surprising facts from the content."
        ),
    },
    "required": ["summary", "keyInsights", "interestingFacts"],
    "additionalProperties": False,
}

HASHTAGS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "hashtags": _string_list("3-5 concise, lowercase hashtags."),
    },
    "required": ["hashtags"],
    "additionalProperties": False,
}

TRENDS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "trends": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "category": {"type": "string"},
                    "title": {"type": "string"},
                    "posts": {"type": "string"},
                },
                "required": ["category", "title", "posts"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["trends"],
    "additionalProperties": False,
}


def response_format(name: str, schema: dict[str, Any]) -> dict[str, Any]:
    """Wrap a schema as a chat-completions `response_format` argument."""
    return {
        "type": "json_schema",
        "json_schema": {"name": name, "strict": True, "schema": schema},
    }
