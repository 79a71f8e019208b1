"""Types for the emulated image generation endpoint."""

from typing_extensions import TypedDict


class ImageRequest(TypedDict, total=False):
    """An OpenAI-style image generation request.

    Attributes:
        prompt: Text description of the image.
        size: Requested size; only "1024x1024" is accepted.
    """
    prompt: str
    size: str


class ImageData(TypedDict):
    """One generated image."""
    revised_prompt: str
    url: str


class ImageResponse(TypedDict):
    """Image generation response body."""
    created: int
    data: list[ImageData]
