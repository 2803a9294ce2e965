"""Tests for value records and their wire format."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from studio_core.models import (
    GeneratedContent,
    ImageAnalysisRequest,
    ImageData,
    SavedContent,
    TextAnalysisRequest,
    UrlAnalysisRequest,
    UrlContent,
    UrlStatus,
    User,
    analysis_request_adapter,
)


def test_generated_content_uses_camel_case_on_the_wire(sample_content):
    data = sample_content.to_json_dict()
    assert set(data) == {"summary", "keyInsights", "interestingFacts", "hashtags"}
    assert data["hashtags"] is None


def test_generated_content_parses_camel_case_json():
    content = GeneratedContent.model_validate_json(
        '{"summary": "s", "keyInsights": ["a"], "interestingFacts": ["b"]}'
    )
    assert content.key_insights == ["a"]
    assert content.interesting_facts == ["b"]


@pytest.mark.parametrize(
    "payload",
    [
        {"summary": "s", "keyInsights": [], "interestingFacts": ["b"]},
        {"summary": "s", "keyInsights": ["a"], "interestingFacts": []},
        {"summary": "  ", "keyInsights": ["a"], "interestingFacts": ["b"]},
        {"summary": "s", "keyInsights": "a", "interestingFacts": ["b"]},
        {"keyInsights": ["a"], "interestingFacts": ["b"]},
    ],
)
def test_generated_content_rejects_bad_shapes(payload):
    with pytest.raises(ValidationError):
        GeneratedContent.model_validate(payload)


def test_generated_content_is_immutable(sample_content):
    with pytest.raises(ValidationError):
        sample_content.summary = "changed"


def test_saved_content_gets_unique_id_and_iso_timestamp(sample_content):
    a = SavedContent.from_generated(sample_content)
    b = SavedContent.from_generated(sample_content)
    assert a.id != b.id
    assert datetime.fromisoformat(a.created_at).tzinfo is not None
    assert a.summary == sample_content.summary


def test_saving_a_saved_item_assigns_a_new_id(sample_content):
    first = SavedContent.from_generated(sample_content)
    again = SavedContent.from_generated(first)
    assert again.id != first.id


def test_saved_content_clamps_long_summaries(sample_content):
    short = SavedContent.from_generated(sample_content)
    long = SavedContent.from_generated(sample_content.model_copy(update={"summary": "x" * 201}))
    assert not short.is_clamped
    assert long.is_clamped


def test_image_data_strips_data_url_prefix():
    image = ImageData(base64="data:image/png;base64,AAAA", mime_type="image/png", name="a.png")
    assert image.base64 == "AAAA"
    assert image.data_url == "data:image/png;base64,AAAA"


def test_image_data_requires_image_mime_type():
    with pytest.raises(ValidationError):
        ImageData(base64="AAAA", mime_type="application/pdf", name="a.pdf")


def test_user_display_name_fallbacks():
    assert User(id="1", first_name="Ada", last_name="Lovelace").display_name == "Ada Lovelace"
    assert User(id="1", first_name="Ada").display_name == "Ada"
    assert User(id="1", email="ada@example.com").display_name == "ada@example.com"
    assert User(id="1").display_name == "User"
    assert User(id="1", email="ada@example.com").initial == "A"
    assert User(id="1").initial == "U"


def test_request_union_dispatches_on_type():
    text = analysis_request_adapter.validate_python({"type": "text", "text": "hello"})
    images = analysis_request_adapter.validate_python(
        {"type": "image", "images": [{"base64": "AA", "mimeType": "image/jpeg", "name": "x.jpg"}]}
    )
    urls = analysis_request_adapter.validate_python(
        {"type": "url", "urls": [{"url": "https://example.com", "status": "success"}], "tone": "Witty"}
    )
    assert isinstance(text, TextAnalysisRequest)
    assert isinstance(images, ImageAnalysisRequest)
    assert isinstance(urls, UrlAnalysisRequest)
    assert urls.tone.value == "Witty"


@pytest.mark.parametrize("word_count", [5, 5000])
def test_word_count_is_bounded(word_count):
    with pytest.raises(ValidationError):
        analysis_request_adapter.validate_python(
            {"type": "text", "text": "hello", "wordCount": word_count}
        )


def test_unknown_request_type_is_rejected():
    with pytest.raises(ValidationError):
        analysis_request_adapter.validate_python({"type": "video", "text": "x"})


def test_usable_urls_need_success_and_content():
    request = UrlAnalysisRequest(
        urls=[
            UrlContent(url="https://a.example", status=UrlStatus.SUCCESS, content="text"),
            UrlContent(url="https://b.example", status=UrlStatus.SUCCESS, content=""),
            UrlContent(url="https://c.example", status=UrlStatus.ERROR),
            UrlContent(url="https://d.example", status=UrlStatus.LOADING),
        ]
    )
    assert [u.url for u in request.usable_urls] == ["https://a.example"]
