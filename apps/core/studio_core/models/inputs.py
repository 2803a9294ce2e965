"""Analysis inputs and the request union."""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import Field, TypeAdapter, field_validator

from studio_core.models.base import CamelModel


class InputType(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    URL = "url"


class Tone(str, Enum):
    PROFESSIONAL = "Professional"
    CASUAL = "Casual"
    WITTY = "Witty"
    INSPIRATIONAL = "Inspirational"
    INFORMATIVE = "Informative"


class Style(str, Enum):
    LINKEDIN = "LinkedIn"
    TWITTER = "Twitter"
    THREAD = "Thread"
    INSTAGRAM = "IG"


class UrlStatus(str, Enum):
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class ImageData(CamelModel):
    """An uploaded image as a base64 payload."""

    base64: str
    mime_type: str
    name: str

    @field_validator("base64")
    @classmethod
    def strip_data_url_prefix(cls, v: str) -> str:
        # Browsers hand over FileReader results as data URLs
        if v.startswith("data:") and "," in v:
            v = v.split(",", 1)[1]
        if not v:
            raise ValueError("image payload is empty")
        return v

    @field_validator("mime_type")
    @classmethod
    def must_be_image(cls, v: str) -> str:
        if not v.startswith("image/"):
            raise ValueError(f"unsupported mime type: {v}")
        return v

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64}"


class UrlContent(CamelModel):
    """A URL the user added, with its fetch status and scraped text."""

    url: str
    status: UrlStatus = UrlStatus.LOADING
    title: str | None = None
    content: str | None = None
    error: str | None = None


class _AnalysisOptions(CamelModel):
    tone: Tone = Tone.PROFESSIONAL
    style: Style = Style.LINKEDIN
    word_count: int | None = Field(default=None, ge=20, le=1000)


class TextAnalysisRequest(_AnalysisOptions):
    type: Literal["text"] = "text"
    text: str


class ImageAnalysisRequest(_AnalysisOptions):
    type: Literal["image"] = "image"
    images: list[ImageData]


class UrlAnalysisRequest(_AnalysisOptions):
    type: Literal["url"] = "url"
    urls: list[UrlContent]

    @property
    def usable_urls(self) -> list[UrlContent]:
        """URLs that were fetched successfully and carry text."""
        return [
            u for u in self.urls
            if u.status == UrlStatus.SUCCESS and u.content
        ]


AnalysisRequest = Annotated[
    Union[TextAnalysisRequest, ImageAnalysisRequest, UrlAnalysisRequest],
    Field(discriminator="type"),
]

analysis_request_adapter: TypeAdapter[AnalysisRequest] = TypeAdapter(AnalysisRequest)
