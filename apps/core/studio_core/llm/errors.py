"""Content-generation error hierarchy."""


class ContentGenerationError(Exception):
    """The provider call failed (network, auth, quota, refusal)."""


class ContentFormatError(ContentGenerationError):
    """The provider answered, but not in the expected JSON shape."""
