"""Type definitions for the proxy."""

from .chat import ChatMessage, ChatRequest, ModelCard, ModelList, StreamOptions
from .images import ImageData, ImageRequest, ImageResponse

__all__ = [
    "ChatMessage",
    "ChatRequest",
    "ImageData",
    "ImageRequest",
    "ImageResponse",
    "ModelCard",
    "ModelList",
    "StreamOptions",
]
