"""Tests for ContentGenerator against a stubbed provider."""

import json

import pytest
from openai import OpenAIError

from conftest import ANALYSIS_JSON, HASHTAGS_JSON, make_generator
from studio_core.llm.client import normalize_hashtags, strip_code_fences
from studio_core.llm.errors import ContentFormatError, ContentGenerationError
from studio_core.models import ImageAnalysisRequest, ImageData, TextAnalysisRequest

TEXT_REQUEST = TextAnalysisRequest(text="Artificial Intelligence is transforming the way we work.")


async def test_analyze_parses_structured_output():
    generator, llm = make_generator(ANALYSIS_JSON)
    content = await generator.analyze(TEXT_REQUEST)

    assert content.summary == "AI is changing how teams work."
    assert len(content.key_insights) == 3
    assert len(content.interesting_facts) == 2
    assert content.hashtags is None

    call = llm.completions.calls[0]
    assert call["model"] == "main-model"
    assert call["temperature"] == 0.7
    assert call["response_format"]["type"] == "json_schema"
    assert call["response_format"]["json_schema"]["name"] == "analysis"
    assert call["response_format"]["json_schema"]["strict"] is True


async def test_analyze_accepts_fenced_json():
    generator, _ = make_generator(f"```json\n{ANALYSIS_JSON}\n```")
    content = await generator.analyze(TEXT_REQUEST)
    assert content.summary.startswith("AI")


@pytest.mark.parametrize(
    "raw",
    [
        "not json at all",
        '{"summary": "s", "keyInsights": [], "interestingFacts": ["f"]}',
        '{"summary": "s", "keyInsights": ["i"], "interestingFacts": []}',
        '{"summary": "s", "keyInsights": ["i"]}',
        '{"summary": 5, "keyInsights": ["i"], "interestingFacts": ["f"]}',
        "[]",
        "",
    ],
)
async def test_analyze_rejects_mismatched_shapes(raw):
    generator, _ = make_generator(raw)
    with pytest.raises(ContentFormatError):
        await generator.analyze(TEXT_REQUEST)


async def test_provider_errors_become_generation_errors():
    generator, _ = make_generator(OpenAIError("connection reset"))
    with pytest.raises(ContentGenerationError) as exc_info:
        await generator.analyze(TEXT_REQUEST)
    assert not isinstance(exc_info.value, ContentFormatError)
    assert "connection reset" in str(exc_info.value)


async def test_image_request_sends_image_parts():
    generator, llm = make_generator(ANALYSIS_JSON)
    request = ImageAnalysisRequest(
        images=[
            ImageData(base64="AAAA", mime_type="image/png", name="slide.png"),
            ImageData(base64="BBBB", mime_type="image/jpeg", name="photo.jpg"),
        ]
    )
    await generator.analyze(request)

    parts = llm.completions.calls[0]["messages"][0]["content"]
    assert parts[0]["type"] == "text"
    assert "slide.png" in parts[0]["text"]
    assert [p["image_url"]["url"] for p in parts[1:]] == [
        "data:image/png;base64,AAAA",
        "data:image/jpeg;base64,BBBB",
    ]


async def test_generate_hashtags_normalises_tags(sample_content):
    generator, llm = make_generator(HASHTAGS_JSON)
    tags = await generator.generate_hashtags(sample_content)
    assert tags == ["#ai", "#machinelearning", "#futureofwork"]
    call = llm.completions.calls[0]
    assert call["model"] == "fast-model"
    assert call["temperature"] == 0.5


async def test_trending_topics_capped_at_five():
    trends = [{"category": "AI · Trending", "title": f"#Topic{i}", "posts": f"{i}K posts"} for i in range(7)]
    generator, llm = make_generator(json.dumps({"trends": trends}))
    topics = await generator.trending_topics()
    assert len(topics) == 5
    assert topics[0].title == "#Topic0"
    assert llm.completions.calls[0]["temperature"] == 0.9


async def test_trending_topics_require_fields():
    generator, _ = make_generator('{"trends": [{"category": "AI", "title": "x"}]}')
    with pytest.raises(ContentFormatError):
        await generator.trending_topics()


async def test_repurpose_attaches_hashtags():
    generator, llm = make_generator(ANALYSIS_JSON, HASHTAGS_JSON)
    content = await generator.repurpose(TEXT_REQUEST)
    assert content.hashtags == ["#ai", "#machinelearning", "#futureofwork"]
    assert len(llm.completions.calls) == 2


async def test_repurpose_survives_hashtag_failure():
    generator, _ = make_generator(ANALYSIS_JSON, OpenAIError("rate limited"))
    content = await generator.repurpose(TEXT_REQUEST)
    assert content.summary
    assert content.hashtags is None


async def test_repurpose_without_hashtags_makes_one_call():
    generator, llm = make_generator(ANALYSIS_JSON)
    await generator.repurpose(TEXT_REQUEST, with_hashtags=False)
    assert len(llm.completions.calls) == 1


async def test_refusal_is_a_generation_error():
    from types import SimpleNamespace

    generator, llm = make_generator()

    async def refuse(**kwargs):
        message = SimpleNamespace(content=None, refusal="I can't help with that.")
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    llm.completions.create = refuse
    with pytest.raises(ContentGenerationError, match="refused"):
        await generator.analyze(TEXT_REQUEST)


def test_strip_code_fences():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'


def test_normalize_hashtags_drops_blanks_and_duplicates():
    assert normalize_hashtags(["#", " ", "#Growth", "growth", "Big Data"]) == ["#growth", "#bigdata"]
